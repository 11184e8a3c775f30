"""Output generation for rosters (PDF, text)."""

from dutyroster.output.pdf_generator import RosterPDFGenerator
from dutyroster.output.text_report import TextReportGenerator

__all__ = [
    "RosterPDFGenerator",
    "TextReportGenerator",
]

"""PDF generation for roster output.

This module creates printable PDF rosters showing:
- One row per working day with the staff member on each duty type
- Duty windows and locations in the column headers
- A workload summary page
"""

from io import BytesIO
from pathlib import Path
from typing import Union

from dutyroster.domain.models import RosterEntry
from dutyroster.output.text_report import roster_grid, workload_by_staff

# Alternating row shading (RGB, 0-1 scale)
ROW_SHADE = (0.94, 0.94, 0.97)
HEADER_FILL = (0.4, 0.4, 0.8)


class RosterPDFGenerator:
    """Generates printable PDF duty rosters.

    Example:
        >>> generator = RosterPDFGenerator()
        >>> generator.generate(entries, "roster.pdf")
    """

    def __init__(
        self,
        page_width: float = 792,  # Letter landscape width (11")
        page_height: float = 612,  # Letter landscape height (8.5")
        margin: float = 36,  # 0.5 inch margins
    ):
        self.page_width = page_width
        self.page_height = page_height
        self.margin = margin

    def generate(
        self,
        entries: list[RosterEntry],
        output_path: Union[str, Path],
        title: str = "Duty Roster",
        include_summary: bool = True,
    ) -> None:
        """Generate PDF roster and save to file.

        Args:
            entries: Stored roster entries, as returned by a store.
            output_path: Path to save the PDF.
            title: Page heading.
            include_summary: Whether to include the workload page.
        """
        from reportlab.lib.pagesizes import landscape, letter
        from reportlab.pdfgen import canvas

        c = canvas.Canvas(str(output_path), pagesize=landscape(letter))
        self._draw(c, entries, title, include_summary)
        c.save()

    def generate_to_buffer(
        self,
        entries: list[RosterEntry],
        title: str = "Duty Roster",
        include_summary: bool = True,
    ) -> BytesIO:
        """Generate PDF and return as bytes buffer."""
        from reportlab.lib.pagesizes import landscape, letter
        from reportlab.pdfgen import canvas

        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=landscape(letter))
        self._draw(c, entries, title, include_summary)
        c.save()
        buffer.seek(0)
        return buffer

    def _draw(self, c, entries: list[RosterEntry], title: str, include_summary: bool) -> None:
        self._draw_roster_pages(c, entries, title)
        if include_summary and entries:
            self._draw_summary_page(c, entries, title)

    def _draw_roster_pages(self, c, entries: list[RosterEntry], title: str) -> None:
        """Draw the day x duty type table, paginated."""
        days, duty_types, cells = roster_grid(entries)

        row_height = 22
        header_height = 60
        footer_height = 30
        usable_height = self.page_height - 2 * self.margin - header_height - footer_height
        rows_per_page = max(1, int(usable_height / row_height) - 1)

        date_col = 110
        table_width = self.page_width - 2 * self.margin - date_col
        col_width = table_width / max(1, len(duty_types))

        windows = {}
        for entry in entries:
            a = entry.assignment
            windows.setdefault(
                a.duty_type,
                f"{a.start_time.strftime('%H:%M')}-{a.end_time.strftime('%H:%M')}, {a.location}",
            )

        total_pages = max(1, (len(days) + rows_per_page - 1) // rows_per_page)
        for page in range(total_pages):
            page_days = days[page * rows_per_page : (page + 1) * rows_per_page]
            self._draw_header(c, title, entries, days)

            y = self.page_height - self.margin - header_height

            # Column headers
            c.setFillColorRGB(*HEADER_FILL)
            c.rect(self.margin, y - row_height, date_col + table_width, row_height, fill=1, stroke=0)
            c.setFillColorRGB(1, 1, 1)
            c.setFont("Helvetica-Bold", 9)
            c.drawString(self.margin + 4, y - 14, "Date")
            for i, duty_type in enumerate(duty_types):
                x = self.margin + date_col + i * col_width
                c.setFont("Helvetica-Bold", 9)
                c.drawString(x + 4, y - 10, duty_type.replace("_", " ").title())
                c.setFont("Helvetica", 6)
                c.drawString(x + 4, y - 18, windows.get(duty_type, "")[:40])
            y -= row_height

            for row, day in enumerate(page_days):
                if row % 2:
                    c.setFillColorRGB(*ROW_SHADE)
                    c.rect(self.margin, y - row_height, date_col + table_width, row_height, fill=1, stroke=0)
                c.setFillColorRGB(0, 0, 0)
                c.setFont("Helvetica", 9)
                c.drawString(self.margin + 4, y - 14, day.strftime("%a %d %b %Y"))
                for i, duty_type in enumerate(duty_types):
                    x = self.margin + date_col + i * col_width
                    names = ", ".join(cells.get((day, duty_type), [])) or "-"
                    c.drawString(x + 4, y - 14, names[: int(col_width / 5)])
                y -= row_height

            c.setFont("Helvetica", 9)
            c.drawCentredString(
                self.page_width / 2,
                self.margin - 10,
                f"Page {page + 1} of {total_pages}",
            )
            c.showPage()

    def _draw_header(self, c, title: str, entries: list[RosterEntry], days: list) -> None:
        """Draw page header with title and period."""
        c.setFont("Helvetica-Bold", 16)
        c.drawString(self.margin, self.page_height - self.margin - 20, title)

        c.setFont("Helvetica", 10)
        if days:
            period = (
                f"{days[0].strftime('%A, %B %d, %Y')} - {days[-1].strftime('%A, %B %d, %Y')}"
            )
        else:
            period = "No duties scheduled"
        c.drawString(
            self.margin,
            self.page_height - self.margin - 35,
            f"{period}    Total Assignments: {len(entries)}",
        )

    def _draw_summary_page(self, c, entries: list[RosterEntry], title: str) -> None:
        """Draw per-staff workload bars."""
        c.setFont("Helvetica-Bold", 16)
        c.drawString(self.margin, self.page_height - self.margin - 20, f"{title} - Workload")

        workload = workload_by_staff(entries)
        totals = {name: sum(per_type.values()) for name, per_type in workload.items()}
        max_total = max(totals.values(), default=0) or 1

        y = self.page_height - self.margin - 60
        bar_left = self.margin + 160
        bar_width = self.page_width - 2 * self.margin - 260

        c.setFont("Helvetica", 9)
        for name in sorted(totals, key=lambda n: (-totals[n], n)):
            if y < self.margin + 20:
                c.showPage()
                c.setFont("Helvetica", 9)
                y = self.page_height - self.margin - 20

            c.setFillColorRGB(0, 0, 0)
            c.drawString(self.margin, y, name[:28])
            c.setFillColorRGB(*HEADER_FILL)
            c.rect(bar_left, y - 2, bar_width * totals[name] / max_total, 10, fill=1, stroke=0)
            c.setFillColorRGB(0, 0, 0)
            breakdown = ", ".join(f"{dt}: {n}" for dt, n in sorted(workload[name].items()))
            c.drawString(bar_left + bar_width + 8, y, f"{totals[name]}  ({breakdown})"[:40])
            y -= 16

        c.showPage()

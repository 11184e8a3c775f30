"""Plain-text roster output.

This module renders stored roster entries as:
- A day-by-day table with one column per duty type
- Per-staff duty counts with a simple histogram
"""

from collections import defaultdict
from datetime import date
from pathlib import Path
from typing import Union

from dutyroster.domain.models import RosterEntry


def roster_grid(
    entries: list[RosterEntry],
) -> tuple[list[date], list[str], dict[tuple[date, str], list[str]]]:
    """Arrange entries as a day x duty type grid.

    Returns:
        Tuple of (dates ascending, duty types in first-seen order,
        (date, duty type) -> staff names).
    """
    days: list[date] = []
    duty_types: list[str] = []
    cells: dict[tuple[date, str], list[str]] = defaultdict(list)

    for entry in entries:
        a = entry.assignment
        if a.duty_date not in days:
            days.append(a.duty_date)
        if a.duty_type not in duty_types:
            duty_types.append(a.duty_type)
        cells[(a.duty_date, a.duty_type)].append(entry.staff_name)

    return sorted(days), duty_types, cells


def workload_by_staff(entries: list[RosterEntry]) -> dict[str, dict[str, int]]:
    """Count duties per staff name and duty type."""
    counts: dict[str, dict[str, int]] = defaultdict(lambda: defaultdict(int))
    for entry in entries:
        counts[entry.staff_name][entry.assignment.duty_type] += 1
    return {name: dict(per_type) for name, per_type in counts.items()}


class TextReportGenerator:
    """Generates a text roster for the terminal or a file."""

    def __init__(self, column_width: int = 20):
        self.column_width = column_width

    def generate(
        self,
        entries: list[RosterEntry],
        output_path: Union[str, Path],
        title: str = "DUTY ROSTER",
    ) -> str:
        """Generate the report and save it to a file.

        Returns:
            The generated text content.
        """
        content = self.generate_to_string(entries, title)
        Path(output_path).write_text(content)
        return content

    def generate_to_string(
        self,
        entries: list[RosterEntry],
        title: str = "DUTY ROSTER",
    ) -> str:
        """Generate the report and return it as a string."""
        width = self.column_width
        lines = []

        lines.append("=" * 80)
        lines.append(title)
        lines.append("=" * 80)

        if not entries:
            lines.append("No duties scheduled.")
            return "\n".join(lines) + "\n"

        days, duty_types, cells = roster_grid(entries)
        lines.append(f"Period: {days[0].isoformat()} to {days[-1].isoformat()}")
        lines.append(f"Total Assignments: {len(entries)}")
        lines.append("")

        header = f"{'Date':<16}" + "".join(f"{dt[:width - 1]:<{width}}" for dt in duty_types)
        lines.append(header)
        lines.append("-" * len(header))
        for day in days:
            row = f"{day.strftime('%a %Y-%m-%d'):<16}"
            for duty_type in duty_types:
                names = ", ".join(cells.get((day, duty_type), [])) or "-"
                row += f"{names[:width - 1]:<{width}}"
            lines.append(row)

        lines.append("")
        lines.append("-" * 80)
        lines.append("DUTIES PER STAFF MEMBER")
        lines.append("-" * 80)

        workload = workload_by_staff(entries)
        for name in sorted(workload, key=lambda n: (-sum(workload[n].values()), n)):
            total = sum(workload[name].values())
            breakdown = ", ".join(
                f"{dt}={workload[name][dt]}" for dt in duty_types if dt in workload[name]
            )
            lines.append(f"{name[:24]:<24} {'#' * total} ({total}) {breakdown}")

        return "\n".join(lines) + "\n"

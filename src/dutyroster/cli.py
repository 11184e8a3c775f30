"""Command-line interface for the duty roster tool."""

import argparse
import sys
from datetime import date, timedelta
from typing import Optional

from dutyroster.config import Settings, configure_logging
from dutyroster.domain.models import DutyType, RosterRequest, StaffMember
from dutyroster.errors import RosterError, StorageError
from dutyroster.output.pdf_generator import RosterPDFGenerator
from dutyroster.output.text_report import TextReportGenerator
from dutyroster.scheduling.roster_generator import RosterGenerator
from dutyroster.service import RosterService
from dutyroster.storage.memory_store import InMemoryRosterStore
from dutyroster.storage.sqlite_store import SQLiteRosterStore
from dutyroster.validation.validator import RosterValidator

DEMO_SCHOOL = "demo-school"


def create_sample_staff(count: int = 8) -> list[StaffMember]:
    """Create sample staff for the demo.

    Args:
        count: Number of staff members to create.
    """
    names = [
        ("Alice", "Wanjiru"), ("Brian", "Otieno"), ("Carol", "Mutua"),
        ("David", "Kamau"), ("Esther", "Njeri"), ("Felix", "Ochieng"),
        ("Grace", "Akinyi"), ("Henry", "Mwangi"), ("Irene", "Chebet"),
        ("James", "Kiprop"), ("Kate", "Wambui"), ("Leo", "Odhiambo"),
    ]
    positions = ["Teacher", "Senior Teacher", "Deputy Head", "Games Master"]

    staff = []
    for i in range(count):
        first, last = names[i % len(names)]
        if i >= len(names):
            first = f"{first}{i // len(names) + 1}"
        staff.append(
            StaffMember(
                id=f"T{i + 1:03d}",
                first_name=first,
                last_name=last,
                position=positions[i % len(positions)],
            )
        )
    return staff


def parse_duty_types(value: str) -> list[str]:
    """Split a comma-separated duty type list, dropping blanks."""
    return [part.strip() for part in value.split(",") if part.strip()]


def run_demo(
    staff_count: int = 8,
    days: int = 10,
    output_path: Optional[str] = None,
    duty_types: Optional[list[str]] = None,
) -> int:
    """Generate a demo roster in memory and print it."""
    start_date = date.today()
    days_until_monday = (7 - start_date.weekday()) % 7
    start_date += timedelta(days=days_until_monday)
    end_date = start_date + timedelta(days=days - 1)

    print(f"Generating demo roster for {staff_count} staff, {start_date} to {end_date}...")

    store = InMemoryRosterStore()
    staff = create_sample_staff(staff_count)
    for member in staff:
        store.add_staff(DEMO_SCHOOL, member)

    request = RosterRequest(
        school_id=DEMO_SCHOOL,
        start_date=start_date,
        end_date=end_date,
        duty_types=duty_types or [dt.value for dt in DutyType],
    )

    try:
        result, stats = RosterGenerator(store).generate_with_stats(request)
    except RosterError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    entries = store.fetch_roster(DEMO_SCHOOL, start_date, end_date)
    print()
    print(TextReportGenerator().generate_to_string(entries, title="DEMO DUTY ROSTER"))

    print(f"  {result.message}")
    print(f"  Working days: {stats['working_days']}, duty types: {stats['duty_types']}")
    metrics = stats["fairness_metrics"]
    for duty_type, spread in metrics.spread.items():
        print(f"  Spread {duty_type}: {spread}")

    validation = RosterValidator().validate(result.assignments, request, staff)
    if validation.is_valid:
        print("\n  Validation: PASSED")
    else:
        print(f"\n  Validation: FAILED ({len(validation.errors)} errors)")
        for error in validation.errors[:5]:
            print(f"    - {error}")
    for warning in validation.warnings:
        print(f"  Warning: {warning}")

    if output_path:
        print(f"\nGenerating PDF: {output_path}")
        RosterPDFGenerator().generate(entries, output_path, title="Demo Duty Roster")
        print("  PDF created successfully!")

    return 0 if validation.is_valid else 1


def open_store(settings: Settings) -> SQLiteRosterStore:
    store = SQLiteRosterStore(settings.db_path)
    store.init_db()
    return store


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="Duty Roster - fair staff duty rostering for schools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s init-db
  %(prog)s add-staff --school S1 --id T001 --first-name Alice --last-name Wanjiru
  %(prog)s generate --school S1 --start 2024-01-15 --end 2024-01-26 \\
      --duty-types morning_duty,lunch_duty
  %(prog)s show --school S1 --start 2024-01-15 --end 2024-01-26 --pdf roster.pdf
  %(prog)s demo --count 12 --output demo.pdf
        """,
    )
    parser.add_argument("--db", type=str, help="SQLite database path (default: $DUTYROSTER_DB_PATH)")
    parser.add_argument("--log-level", type=str, help="Logging level (default: $DUTYROSTER_LOG_LEVEL)")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    subparsers.add_parser("init-db", help="Create the database tables")

    staff_parser = subparsers.add_parser("add-staff", help="Register a staff member")
    staff_parser.add_argument("--school", type=str, help="School ID (default: $DUTYROSTER_SCHOOL_ID)")
    staff_parser.add_argument("--id", required=True, type=str, help="Staff ID")
    staff_parser.add_argument("--first-name", required=True, type=str)
    staff_parser.add_argument("--last-name", required=True, type=str)
    staff_parser.add_argument("--position", type=str, default="")
    staff_parser.add_argument("--inactive", action="store_true", help="Register as inactive")

    generate_parser = subparsers.add_parser("generate", help="Generate and store a duty roster")
    generate_parser.add_argument("--school", type=str, help="School ID (default: $DUTYROSTER_SCHOOL_ID)")
    generate_parser.add_argument("--start", required=True, type=str, help="Start date (YYYY-MM-DD)")
    generate_parser.add_argument("--end", required=True, type=str, help="End date (YYYY-MM-DD)")
    generate_parser.add_argument(
        "--duty-types", "-t",
        type=str,
        default=",".join(dt.value for dt in DutyType),
        help="Comma-separated duty types in fill order (default: all known types)",
    )

    show_parser = subparsers.add_parser("show", help="Print a stored roster")
    show_parser.add_argument("--school", type=str, help="School ID (default: $DUTYROSTER_SCHOOL_ID)")
    show_parser.add_argument("--start", required=True, type=str, help="Start date (YYYY-MM-DD)")
    show_parser.add_argument("--end", required=True, type=str, help="End date (YYYY-MM-DD)")
    show_parser.add_argument("--pdf", type=str, help="Also write the roster to this PDF")

    demo_parser = subparsers.add_parser("demo", help="Generate a demo roster in memory")
    demo_parser.add_argument(
        "--count", "-c",
        type=int,
        default=8,
        help="Number of staff to generate (default: 8)",
    )
    demo_parser.add_argument(
        "--days", "-d",
        type=int,
        default=10,
        help="Number of calendar days to roster (default: 10)",
    )
    demo_parser.add_argument("--output", "-o", type=str, help="Output PDF file path")
    demo_parser.add_argument(
        "--duty-types", "-t",
        type=str,
        default=",".join(dt.value for dt in DutyType),
        help="Comma-separated duty types in fill order (default: all known types)",
    )

    args = parser.parse_args(argv)

    try:
        settings = Settings.from_env()
    except ValueError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1
    if args.db:
        settings.db_path = args.db
    configure_logging(args.log_level or settings.log_level)

    if args.command == "demo":
        return run_demo(args.count, args.days, args.output, parse_duty_types(args.duty_types))
    if args.command is None:
        parser.print_help()
        return 1

    school_id = getattr(args, "school", None) or settings.school_id
    if args.command != "init-db" and not school_id:
        print("[ERROR] --school is required (or set DUTYROSTER_SCHOOL_ID)", file=sys.stderr)
        return 1

    try:
        store = open_store(settings)
    except StorageError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    try:
        if args.command == "init-db":
            print(f"Database ready: {settings.db_path}")
            return 0

        if args.command == "add-staff":
            member = StaffMember(
                id=args.id,
                first_name=args.first_name,
                last_name=args.last_name,
                position=args.position,
                active=not args.inactive,
            )
            try:
                store.add_staff(school_id, member)
            except StorageError as e:
                print(f"[ERROR] {e}", file=sys.stderr)
                return 1
            print(f"Added {member.name} ({member.id}) to {school_id}")
            return 0

        service = RosterService(store, fairness_window_days=settings.fairness_window_days)

        if args.command == "generate":
            outcome = service.generate_duty_roster(
                school_id, args.start, args.end, parse_duty_types(args.duty_types)
            )
            if not outcome["success"]:
                print(f"[ERROR] {outcome['error']}", file=sys.stderr)
                return 1
            print(outcome["message"])
            return 0

        if args.command == "show":
            try:
                entries = store.fetch_roster(
                    school_id, date.fromisoformat(args.start), date.fromisoformat(args.end)
                )
            except (StorageError, ValueError) as e:
                print(f"[ERROR] {e}", file=sys.stderr)
                return 1
            print(TextReportGenerator().generate_to_string(entries, title=f"DUTY ROSTER - {school_id}"))
            if args.pdf:
                RosterPDFGenerator().generate(entries, args.pdf, title=f"Duty Roster - {school_id}")
                print(f"PDF written to: {args.pdf}")
            return 0
    finally:
        store.close()

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())

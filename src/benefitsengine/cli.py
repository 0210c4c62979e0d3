"""Command-line interface for benefitsengine."""

from __future__ import annotations

import argparse
import sys
from datetime import date
from decimal import Decimal, InvalidOperation

from benefitsengine.config.settings import Settings
from benefitsengine.console.logger import EngineConsole
from benefitsengine.core.dates import require_date, to_date
from benefitsengine.core.errors import ValidationError
from benefitsengine.core.models import EnrollmentRequest
from benefitsengine.core.types import CoverageSelection, Relationship
from benefitsengine.engine.history import open_entry
from benefitsengine.orchestrator.service import BenefitsService
from benefitsengine.storage.repository import SQLiteRateStore


console = EngineConsole()

COVERAGE_CHOICES = {
    "employee": CoverageSelection.EMPLOYEE_ONLY,
    "employee-spouse": CoverageSelection.EMPLOYEE_SPOUSE,
    "employee-children": CoverageSelection.EMPLOYEE_CHILDREN,
    "family": CoverageSelection.EMPLOYEE_SPOUSE_CHILDREN,
}


def _open_store(settings: Settings, db_path: str | None) -> SQLiteRateStore:
    return SQLiteRateStore(db_path or settings.database.path, timeout=settings.database.timeout_seconds)


def _amount(value: str | None) -> Decimal | None:
    if value is None:
        return None
    try:
        amount = Decimal(value)
    except InvalidOperation as e:
        raise ValidationError(f"Invalid amount: {value!r}") from e
    if not amount.is_finite() or amount < 0:
        raise ValidationError(f"Amount must be a non-negative number: {value!r}")
    return amount


def init_db(store: SQLiteRateStore, sample: bool) -> None:
    """Initialize the rate store, optionally with demo data."""
    if sample:
        store.load_sample_data()
    console.print_success(f"Rate store ready at {store.db_path}")
    console.print_db_stats(store.get_stats())


def enroll(service: BenefitsService, args: argparse.Namespace) -> None:
    request = EnrollmentRequest(
        participant_id=args.participant_id,
        plan_id=args.plan_id,
        effective_date=to_date(args.effective),
        coverage=COVERAGE_CHOICES[args.coverage] if args.coverage else None,
        plan_option_id=args.option,
        rate_override=_amount(args.override),
    )
    created = service.enroll(request)
    console.print_success(f"Created {len(created)} enrollment record(s)")
    show_enrollments(service, args.participant_id)


def add_dependent(service: BenefitsService, args: argparse.Namespace) -> None:
    dependent, created = service.add_dependent(
        args.participant_id,
        Relationship(args.relationship),
        name=args.name or "",
        dob=to_date(args.dob),
    )
    console.print_success(
        f"Added {dependent.relationship.value.lower()} {dependent.id}; "
        f"extended {len(created)} existing enrollment(s)"
    )


def renew(service: BenefitsService, args: argparse.Namespace) -> None:
    if args.renewal_id:
        report = service.run_renewal(args.renewal_id)
    else:
        if not args.plan_ids:
            raise ValidationError("Give plan ids to renew or --id of a scheduled renewal")
        renewal_date = require_date(args.date, "Renewal date")
        renewal = service.schedule_renewal(renewal_date, args.plan_ids, args.group)
        report = service.run_renewal(renewal.id)
    console.print_renewal_report(report)
    if not report.ok:
        sys.exit(2)


def show_rates(service: BenefitsService, option_id: str | None, plan_id: str | None) -> None:
    if not option_id and not plan_id:
        raise ValidationError("Give --option or --plan")
    today = service.today or date.today()
    rates = service.store.load_candidate_rates(option_id=option_id, plan_id=plan_id)
    current = service.current_rate(option_id=option_id, plan_id=plan_id)
    title = f"Rates for option {option_id}" if option_id else f"Rates for plan {plan_id}"
    console.print_rate_table(title, rates, today, current)


def show_enrollments(service: BenefitsService, participant_id: str) -> None:
    service.store.get_participant(participant_id)
    enrollments = service.store.list_enrollments(participant_id)
    histories = service.store.load_rate_histories([e.id for e in enrollments if e.id])
    current = {eid: open_entry(entries, eid) for eid, entries in histories.items()}
    console.print_enrollments(enrollments, current)


def show_history(service: BenefitsService, enrollment_id: str) -> None:
    service.store.get_enrollment(enrollment_id)
    console.print_history(enrollment_id, service.store.load_rate_history(enrollment_id))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="benefitsengine", description="Rate resolution, enrollment and renewal engine"
    )
    parser.add_argument("--db", help="Rate store path (default: settings)")
    parser.add_argument("--today", help="Reference date for ages and display (YYYY-MM-DD)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show engine logs")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    init_cmd = subparsers.add_parser("init-db", help="Initialize the rate store")
    init_cmd.add_argument("--sample", action="store_true", help="Load demo data")

    enr = subparsers.add_parser("enroll", help="Enroll a participant in a plan")
    enr.add_argument("participant_id")
    enr.add_argument("plan_id")
    enr.add_argument("--effective", "-e", help="Effective date (YYYY-MM-DD)")
    enr.add_argument("--coverage", "-c", choices=list(COVERAGE_CHOICES), help="Who is covered")
    enr.add_argument("--option", "-o", help="Plan option id (composite/other plans)")
    enr.add_argument("--override", help="Manual rate override amount")

    dep = subparsers.add_parser("add-dependent", help="Record a dependent and extend coverage")
    dep.add_argument("participant_id")
    dep.add_argument("relationship", choices=[r.value for r in Relationship])
    dep.add_argument("--name", "-n")
    dep.add_argument("--dob", help="Date of birth (YYYY-MM-DD)")

    ren = subparsers.add_parser("renew", help="Schedule and process a renewal")
    ren.add_argument("plan_ids", nargs="*", help="Plans to renew")
    ren.add_argument("--date", "-d", help="Renewal date (YYYY-MM-DD)")
    ren.add_argument("--group", "-g", help="Group the renewal belongs to")
    ren.add_argument("--id", dest="renewal_id", help="Re-run a scheduled renewal")

    rates = subparsers.add_parser("rates", help="Show a rate table with the current rate")
    rates.add_argument("--option", "-o")
    rates.add_argument("--plan", "-p")

    enrs = subparsers.add_parser("enrollments", help="List a participant's enrollments")
    enrs.add_argument("participant_id")

    hist = subparsers.add_parser("history", help="Show an enrollment's rate history")
    hist.add_argument("enrollment_id")

    subparsers.add_parser("stats", help="Show rate store statistics")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    settings = Settings()
    console.verbose = args.verbose
    console.setup_logging(settings.log_level)

    try:
        store = _open_store(settings, args.db)
        service = BenefitsService(settings, store=store, today=to_date(args.today))
        if args.command == "init-db":
            init_db(store, args.sample)
        elif args.command == "enroll":
            enroll(service, args)
        elif args.command == "add-dependent":
            add_dependent(service, args)
        elif args.command == "renew":
            renew(service, args)
        elif args.command == "rates":
            show_rates(service, args.option, args.plan)
        elif args.command == "enrollments":
            show_enrollments(service, args.participant_id)
        elif args.command == "history":
            show_history(service, args.enrollment_id)
        elif args.command == "stats":
            console.print_db_stats(service.store.get_stats())
    except KeyboardInterrupt:
        console.console.print("\n[yellow]Cancelled by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print_error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()

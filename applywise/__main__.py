"""Main entry point for the ApplyWise CLI."""

import argparse
import json
import sys
from pathlib import Path

from applywise import __version__
from applywise.config.settings import Settings
from applywise.utils.logging import configure_logging


def _enum_choice(enum_cls):
    def parse(value: str):
        for member in enum_cls:
            if value.strip().lower() in (member.value.lower(), member.name.lower()):
                return member
        choices = ", ".join(member.value for member in enum_cls)
        raise argparse.ArgumentTypeError(f"must be one of: {choices}")

    parse.__name__ = enum_cls.__name__
    return parse


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    from applywise.tracker.models import ApplicationStatus, Priority
    from applywise.tracker.query import SortOrder

    parser = argparse.ArgumentParser(
        prog="applywise",
        description="ApplyWise: track job applications and their progress",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m applywise stats --file data/applications.yaml
  python -m applywise list --search swift --sort "Company A-Z"
  python -m applywise followups
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set the log level (overrides settings)",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        description="Available commands",
    )

    def add_file_argument(subparser: argparse.ArgumentParser) -> None:
        subparser.add_argument(
            "--file",
            type=Path,
            default=None,
            help="Snapshot file to load (YAML or JSON; defaults to SNAPSHOT_PATH)",
        )

    stats_parser = subparsers.add_parser("stats", help="Show application statistics")
    add_file_argument(stats_parser)
    stats_parser.add_argument(
        "--json",
        action="store_true",
        help="Print statistics as JSON",
    )

    list_parser = subparsers.add_parser("list", help="List applications")
    add_file_argument(list_parser)
    list_parser.add_argument("--search", default="", help="Search text")
    list_parser.add_argument(
        "--status",
        type=_enum_choice(ApplicationStatus),
        default=None,
        help="Only show applications with this status",
    )
    list_parser.add_argument(
        "--priority",
        type=_enum_choice(Priority),
        default=None,
        help="Only show applications with this priority",
    )
    list_parser.add_argument(
        "--sort",
        type=_enum_choice(SortOrder),
        default=SortOrder.DATE_DESCENDING,
        help="Sort order (e.g. 'Newest First', 'Company A-Z', 'Status')",
    )

    followups_parser = subparsers.add_parser(
        "followups", help="Show follow-ups due soon"
    )
    add_file_argument(followups_parser)

    insights_parser = subparsers.add_parser(
        "insights", help="Show recommendations based on your statistics"
    )
    add_file_argument(insights_parser)

    validate_parser = subparsers.add_parser(
        "validate", help="Validate every application in a snapshot"
    )
    add_file_argument(validate_parser)

    return parser


def _format_row(application) -> str:
    row = (
        f"- [{application.status.value}] {application.title} "
        f"({application.priority.value})"
    )
    if application.location:
        row += f" - {application.location}"
    return row


def main(args: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        args: Command line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    settings = Settings()

    log_level = parsed.log_level or settings.log_level
    logger = configure_logging(level=log_level)

    if parsed.command is None:
        parser.print_help()
        return 0

    logger.debug("ApplyWise v%s running %s", __version__, parsed.command)

    from applywise.tracker.analytics import ApplicationAnalytics
    from applywise.tracker.errors import TrackerError
    from applywise.tracker.loader import SnapshotLoader
    from applywise.tracker.query import QueryCriteria, apply_query, group_applications
    from applywise.tracker.repository import ApplicationRepository
    from applywise.tracker.validation import validation_error

    snapshot = parsed.file or settings.snapshot_path
    repository = ApplicationRepository()
    try:
        SnapshotLoader().load_into(snapshot, repository)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except TrackerError as e:
        print(f"Error: {e} ({e.detail})", file=sys.stderr)
        return 1

    analytics = ApplicationAnalytics(repository, settings)

    if parsed.command == "stats":
        stats = analytics.stats()
        if parsed.json:
            print(json.dumps(stats.to_dict(), indent=2))
            return 0
        print(f"Total Applications: {stats.total}")
        print(f"Pending Applications: {stats.pending}")
        print(f"Active Applications: {stats.active}")
        print(f"Interviews: {stats.interviews}")
        print(f"Offers: {stats.offers}")
        print(f"Rejections: {stats.rejections}")
        print(f"Interview Conversion: {stats.interview_rate:.1f}%")
        print(f"Offer Conversion: {stats.success_rate:.1f}%")
        print(f"Applications This Week: {len(analytics.this_week())}")
        print(f"Follow-ups Due: {len(analytics.follow_ups_due())}")
        print(f"High Priority Apps: {len(analytics.high_priority())}")
        return 0

    if parsed.command == "list":
        criteria = QueryCriteria(
            search_text=parsed.search,
            status=parsed.status,
            priority=parsed.priority,
            sort_order=parsed.sort,
        )
        results = apply_query(repository.list_all(), criteria)
        if not results:
            if criteria.search_text:
                print(f'No results for "{criteria.search_text}"')
            else:
                print("No applications match your filters")
            return 0
        for group in group_applications(results, criteria.sort_order):
            if group.key is not None:
                print(f"\n{group.key.value} ({len(group.applications)})")
            for application in group.applications:
                print(_format_row(application))
        return 0

    if parsed.command == "followups":
        due = analytics.follow_ups_due()
        if not due:
            print("No follow-ups due.")
            return 0
        for application in due:
            print(
                f"- {application.follow_up_date:%Y-%m-%d}: {application.title}"
                + (f" <{application.contact_email}>" if application.contact_email else "")
            )
        return 0

    if parsed.command == "insights":
        for insight in analytics.insights():
            print(f"- {insight}")
        return 0

    if parsed.command == "validate":
        failures = 0
        for application in repository.list_all():
            kind = validation_error(application)
            if kind is not None:
                failures += 1
                print(f"- {application.id}: {kind.message}")
        total = len(repository)
        print(f"{total - failures}/{total} application(s) valid")
        return 1 if failures else 0

    return 0


if __name__ == "__main__":
    sys.exit(main())

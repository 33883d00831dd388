"""Administrative command line for folding resource grants into memberships.

Usage:
    folio-grants status
    folio-grants migrate
    folio-grants cleanup

Each batch is best-effort: failed records are listed at the end and the
exit code is 1 when any record failed.
"""

from __future__ import annotations

import argparse
import asyncio
from uuid import uuid4

from rich import box
from rich.console import Console
from rich.table import Table

from iam.application.value_objects import MigrationReport, MigrationStatus
from iam.composition import get_grant_migration_service
from infrastructure.database import (
    close_database_connections,
    read_session,
    write_session,
)
from infrastructure.logging import (
    bind_observation_context,
    clear_observation_context,
    configure_logging,
)
from shared_kernel.observability_context import ObservationContext

console = Console()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Migrate per-resource grants into workspace memberships",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s status
  %(prog)s migrate
  %(prog)s cleanup --debug
        """,
    )
    parser.add_argument(
        "command",
        choices=["status", "migrate", "cleanup"],
        help="status: show counts; migrate: create memberships; "
        "cleanup: delete grants covered by a membership",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def render_status(status: MigrationStatus) -> Table:
    """Render grant and membership counts."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    for grant_status, count in status.grants_by_status.items():
        table.add_row(f"{grant_status} grants", str(count))
    table.add_row("active memberships", str(status.active_memberships))
    return table


def render_report(report: MigrationReport) -> Table:
    """Render the totals of one batch."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_row("examined", str(report.examined))
    table.add_row("[green]processed[/green]", str(report.processed))
    table.add_row("skipped", str(report.skipped))
    table.add_row("[red]failed[/red]", str(report.failed))
    return table


def render_failures(report: MigrationReport) -> Table:
    """Render one row per failed grant."""
    table = Table(show_header=True, box=box.SIMPLE, padding=(0, 1))
    table.add_column("grant")
    table.add_column("error")
    for failure in report.failures:
        table.add_row(failure.record_id, failure.error)
    return table


async def run(command: str) -> int:
    """Execute one command and return the exit code.

    status only reads and uses the read database; the batches use the write
    database.
    """
    try:
        if command == "status":
            async with read_session() as session:
                service = get_grant_migration_service(session)
                status = await service.migration_status()
            console.print(render_status(status))
            return 0

        async with write_session() as session:
            service = get_grant_migration_service(session)

            if command == "migrate":
                report = await service.migrate_grants_to_memberships()
            else:
                report = await service.cleanup_redundant_grants()
    finally:
        await close_database_connections()

    console.print(render_report(report))
    if report.failures:
        console.print(render_failures(report))
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the folio-grants script."""
    args = parse_args(argv)
    configure_logging(debug=args.debug or None)
    bind_observation_context(
        ObservationContext(request_id=str(uuid4()), extra={"command": args.command})
    )
    try:
        return asyncio.run(run(args.command))
    finally:
        clear_observation_context()


if __name__ == "__main__":
    raise SystemExit(main())

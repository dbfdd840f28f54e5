"""Review CLI: ``swasthsetu-review``.

A standalone command that connects to the database and works the admin
review queue without going through the HTTP API.  Intended for operators
and one-off maintenance.

Examples::

    # Show every pending registration, newest first
    uv run swasthsetu-review pending

    # Approve a doctor registration and print the issued credential
    uv run swasthsetu-review approve doctor reg-doctor-1760659200000

    # Decline with a reason
    uv run swasthsetu-review decline pharmacy reg-pharmacy-1760659200000 \\
        --reason "Registration number could not be verified"
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from swasthsetu_db.models.enums import Role

logger = logging.getLogger(__name__)


async def run_review(
    command: str,
    *,
    role: str | None = None,
    registration_id: str | None = None,
    reason: str | None = None,
    catalog_dir: str | None = None,
) -> int:
    """Execute one review command and return the process exit code.

    Creates its own database session, runs the workflow, and commits.
    An unknown registration id is reported and exits with status 1.
    """
    # Lazy imports to avoid loading DB machinery at module import time
    from swasthsetu_db.engine import dispose_engine, get_session_factory
    from swasthsetu_registry.catalog_store import CatalogStore
    from swasthsetu_registry.workflow import RegistrationWorkflow

    catalog = CatalogStore(catalog_dir=catalog_dir)
    catalog.load()
    workflow = RegistrationWorkflow(catalog)
    factory = get_session_factory()

    try:
        async with factory() as db:
            if command == "pending":
                pending = await workflow.list_pending(db)
                for reg in pending:
                    print(
                        f"{reg.id}\t{reg.role}\t{reg.display_name}\t"
                        f"{reg.created_at.isoformat()}"
                    )
                print(f"Pending registrations: {len(pending)}")
                return 0

            if command == "approve":
                issued = await workflow.approve_registration(
                    db, registration_id=registration_id, role=role,
                )
                if issued is None:
                    print(f"No {role} registration with id {registration_id}")
                    return 1
                await db.commit()
                print(f"Approved {issued.registration_id} ({issued.display_name})")
                print(f"Login: {issued.login_identifier}")
                print(f"Password: {issued.secret}")
                return 0

            if command == "decline":
                info = await workflow.decline_registration(
                    db, registration_id=registration_id, role=role, reason=reason,
                )
                if info is None:
                    print(f"No {role} registration with id {registration_id}")
                    return 1
                await db.commit()
                print(f"Declined {info.id} ({info.display_name})")
                return 0

            raise ValueError(f"Unknown review command: {command}")
    finally:
        await dispose_engine()


def cli() -> None:
    """Console-script entry point: ``swasthsetu-review``.

    Parses command-line arguments and runs the async review function.
    """
    parser = argparse.ArgumentParser(
        prog="swasthsetu-review",
        description="Review pending SwasthSetu registrations.",
    )
    parser.add_argument(
        "--catalog-dir",
        default=None,
        help="Catalog directory (default: the catalog shipped with the SDK)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("pending", help="List pending registrations across roles")

    roles = [r.value for r in Role]

    approve = sub.add_parser("approve", help="Approve a pending registration")
    approve.add_argument("role", choices=roles)
    approve.add_argument("registration_id")

    decline = sub.add_parser("decline", help="Decline a pending registration")
    decline.add_argument("role", choices=roles)
    decline.add_argument("registration_id")
    decline.add_argument("--reason", required=True, help="Reason shown to the applicant")

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    try:
        code = asyncio.run(
            run_review(
                args.command,
                role=getattr(args, "role", None),
                registration_id=getattr(args, "registration_id", None),
                reason=getattr(args, "reason", None),
                catalog_dir=args.catalog_dir,
            )
        )
    except ValueError as exc:
        logger.error("%s", exc)
        code = 2

    sys.exit(code)

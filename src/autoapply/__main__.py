"""Entry point: ``python -m autoapply [serve|run]``."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import sys

import uvicorn

from autoapply.exceptions import AutoApplyError, SessionConflictError
from autoapply.models import SessionStatus
from autoapply.orchestrator import SessionRunner
from autoapply.reporting import console
from autoapply.service import AutoApplyService, build_criteria
from autoapply.settings import AppSettings
from autoapply.sources.registry import build_sources
from autoapply.storage.database import Database
from autoapply.storage.profiles import ProfileStore
from autoapply.storage.sessions import SessionStore
from autoapply.web.app import create_app


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        datefmt="%H:%M:%S",
    )
    # Quiet noisy libraries
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def _serve(settings: AppSettings) -> None:
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


async def _run_foreground(settings: AppSettings) -> int:
    criteria = build_criteria(
        settings.job_titles,
        settings.locations,
        salary_min=settings.salary_min,
        salary_max=settings.salary_max,
        exclude_companies=settings.exclude_companies,
        include_remote=settings.include_remote,
    )
    db = Database(settings.database_path)
    store = SessionStore(db)
    service = AutoApplyService(store, SessionRunner(store, ProfileStore(db), build_sources(settings)))
    try:
        session_id = await service.start(settings.user_id, criteria)
        try:
            final = await console.follow_session(
                lambda: service.status(settings.user_id, session_id),
                settings.poll_interval_seconds,
            )
        except asyncio.CancelledError:
            with contextlib.suppress(SessionConflictError):
                await service.stop(settings.user_id, session_id)
            raise
        console.print_session_report(final)
        return 0 if final.status is SessionStatus.COMPLETED else 1
    finally:
        await service.shutdown()
        db.close()


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="autoapply", description="Automated job applications.")
    parser.add_argument("--config", help="Path to settings.yaml (default: project root).")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("serve", help="Run the HTTP API.")
    sub.add_parser("run", help="Run one session in the foreground using the configured criteria.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    settings = AppSettings.from_yaml(args.config)
    _configure_logging(settings.log_level)

    if args.command == "serve":
        _serve(settings)
        return

    console.print_banner()
    try:
        sys.exit(asyncio.run(_run_foreground(settings)))
    except AutoApplyError as exc:
        logging.error("%s", exc)
        sys.exit(2)
    except KeyboardInterrupt:
        logging.info("Interrupted by user.")
        sys.exit(130)


if __name__ == "__main__":
    main()

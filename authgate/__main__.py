# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Command line entrypoint: serve, create-user, reap, describe."""

from __future__ import annotations

import argparse
import sys
from datetime import timedelta

from authgate.app import create_app
from authgate.container import Container
from authgate.infrastructure.db import describe_db, init_db
from authgate.shared.config import AppConfig, load_config
from authgate.shared.errors import AppError
from authgate.shared.logging import logger, setup_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="authgate", description="Token issuing auth server")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP server")
    serve.add_argument(
        "--clear",
        action="store_true",
        help="TEST ONLY: delete the SQLite database file before starting",
    )

    create_user = sub.add_parser("create-user", help="Register a user")
    create_user.add_argument("user_id")
    create_user.add_argument("email")
    create_user.add_argument("password")

    reap = sub.add_parser("reap", help="Delete expired tokens")
    reap.add_argument(
        "--grace-seconds",
        type=float,
        default=None,
        help="Only delete tokens that ended this long ago (default: TOKEN_REAP_GRACE_SECONDS)",
    )

    sub.add_parser("describe", help="List the tables in the store")
    return parser


def _clear_database(config: AppConfig) -> None:
    path = config.database.sqlite_path()
    if path is None:
        raise SystemExit("--clear only works with a file backed sqlite DATABASE_URL")
    if path.exists():
        path.unlink()
        logger.warning(f"serve: removed database {path}")


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    config = load_config()
    setup_logging(
        "DEBUG" if args.verbose else config.effective_log_level,
        log_file=config.log_file,
    )

    if args.command == "serve":
        if args.clear:
            _clear_database(config)
        app = create_app(config)
        app.run(host=config.server.host, port=config.server.port)
        return 0

    container = Container(config)
    init_db(container.engine)
    try:
        if args.command == "create-user":
            container.register_user_use_case.execute(
                args.email, args.password, user_id=args.user_id
            )
            print(f"Created user {args.user_id}")
        elif args.command == "reap":
            reap = container.reap_tokens_use_case
            cutoff = None
            if args.grace_seconds is not None:
                cutoff = container.clock() - timedelta(seconds=args.grace_seconds)
            print(f"Removed {reap.execute(cutoff)} expired tokens")
        elif args.command == "describe":
            for name in describe_db(container.engine):
                print(name)
    except AppError as exc:
        print(f"{args.command}: {exc.code} {dict(exc.context or {})}", file=sys.stderr)
        return 1
    finally:
        container.engine.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())

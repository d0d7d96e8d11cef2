"""CLI entrypoint for the Nexus proof of concept.

Commands:
- setup-env: register namespaces (local only) and the Nexus endpoint
- worker:    serve the caller and handler namespaces until interrupted
- demo:      setup-env (unless skipped), start both workers and run the caller workflow once
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from nexus_poc import __version__
from nexus_poc.admin.env_setup import EnvironmentSetupError, setup_env
from nexus_poc.config import PocOptions, PocSettings
from nexus_poc.connection.clients import create_namespace_clients
from nexus_poc.connection.tls import CertificateError
from nexus_poc.logging import configure_logging
from nexus_poc.worker import run_demo, run_workers

logger = logging.getLogger(__name__)


def _add_connection_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--cloud",
        action="store_true",
        help="Run on cloud (default local)",
    )
    parser.add_argument(
        "--certs-dir",
        type=Path,
        default=None,
        help="Directory with cloud TLS certificates (default from NEXUS_POC_CERTS_DIR)",
    )
    parser.add_argument(
        "--caller-namespace",
        default=None,
        help="Caller namespace (in cloud this should include the account ID)",
    )
    parser.add_argument(
        "--handler-namespace",
        default=None,
        help="Handler namespace (in cloud this should include the account ID)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nexus-poc",
        description="Cross-namespace Nexus operations proof of concept",
    )
    parser.add_argument("--version", action="version", version=f"nexus-poc {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    setup = subparsers.add_parser(
        "setup-env",
        help="Register namespaces (local only) and the Nexus endpoint",
    )
    _add_connection_args(setup)

    worker = subparsers.add_parser(
        "worker",
        help="Run the caller and handler workers until interrupted",
    )
    _add_connection_args(worker)

    demo = subparsers.add_parser(
        "demo",
        help="Set up the environment, start both workers and execute the caller workflow",
    )
    _add_connection_args(demo)
    demo.add_argument(
        "--skip-env-setup",
        action="store_true",
        help="Skip env setup (namespace and service registration)",
    )
    demo.add_argument("--cell-id", default="cell-1", help="Cell to provision")
    demo.add_argument("--stuff", type=int, default=0, help="Integer payload sent with the cell")

    return parser


def options_from_args(settings: PocSettings, args: argparse.Namespace) -> PocOptions:
    return PocOptions.from_settings(
        settings,
        cloud=args.cloud,
        certs_dir=args.certs_dir,
        skip_env_setup=getattr(args, "skip_env_setup", False),
        caller_namespace=args.caller_namespace,
        handler_namespace=args.handler_namespace,
    )


async def _serve(settings: PocSettings, options: PocOptions) -> None:
    clients = await create_namespace_clients(settings, options)
    await run_workers(clients, settings)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = PocSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)
    options = options_from_args(settings, args)
    logger.info(
        "Resolved options",
        extra={
            "command": args.command,
            "cloud": options.cloud,
            "caller_namespace": options.caller_namespace,
            "handler_namespace": options.handler_namespace,
        },
    )

    try:
        if args.command == "setup-env":
            endpoint = asyncio.run(setup_env(settings, options))
            print(
                f"Endpoint {endpoint.spec.name!r} routes to "
                f"{options.handler_namespace}/{settings.handler_task_queue}"
            )
            return 0

        if args.command == "worker":
            asyncio.run(_serve(settings, options))
            return 0

        if args.command == "demo":
            output = asyncio.run(
                run_demo(settings, options, cell_id=args.cell_id, stuff=args.stuff)
            )
            print(f"Cell {output.cell_id!r}: status={output.status} stuff={output.stuff}")
            return 0

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except CertificateError as e:
        logger.error(str(e), extra={"certs_dir": str(options.certs_dir)})
        print(f"TLS error: {e}", file=sys.stderr)
        return 2

    except EnvironmentSetupError as e:
        logger.exception("Environment setup failed")
        print(f"Environment setup failed: {e}", file=sys.stderr)
        return 3

    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())

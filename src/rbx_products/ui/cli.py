from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from rbx_products import __version__
from rbx_products.adapters.catalog_file import CatalogExistsError
from rbx_products.app import download_products, init_catalog, sync_products
from rbx_products.config import ConfigurationError, configure_logging

from .confirm import AutoConfirmation, TerminalConfirmation

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from rbx_products.domain.ports import Confirmation

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="rbx-products",
        description="Synchronise a version-controlled product catalog with a Roblox universe",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="Automatically answer yes to all prompts",
    )
    parser.add_argument(
        "-o",
        "--overwrite",
        action="store_true",
        help="Let remote values win merges and apply every diff without prompting",
    )
    parser.add_argument(
        "-f",
        "--file",
        type=str,
        help="Path to the catalog file (default: products.toml or $RBX_PRODUCTS_FILE)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("init", help="Initializes the products file")
    subparsers.add_parser("download", help="Downloads all the products from the universe")
    subparsers.add_parser("sync", help="Syncs products between file and universe")

    return parser.parse_args(list(argv))


def _confirmation(args: argparse.Namespace) -> Confirmation:
    if args.yes:
        return AutoConfirmation()
    return TerminalConfirmation()


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    try:
        configure_logging(level=logging.DEBUG if parsed_args.verbose else None)
    except ConfigurationError as exc:
        print(f"rbx-products: {exc}", file=sys.stderr)  # noqa: T201
        sys.exit(1)

    try:
        if parsed_args.command == "init":
            log.info("Initializing products file...")
            init_catalog(catalog_path=parsed_args.file)
        elif parsed_args.command == "download":
            download_products(overwrite=parsed_args.overwrite, catalog_path=parsed_args.file)
        elif parsed_args.command == "sync":
            sync_products(
                confirmation=_confirmation(parsed_args),
                overwrite=parsed_args.overwrite,
                catalog_path=parsed_args.file,
            )
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except CatalogExistsError as exc:
        log.error("%s. Aborting initialization.", exc)  # noqa: TRY400
        sys.exit(1)
    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()

"""Shared argument and logging setup for the CLI tools."""
import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console

from studyplan import config

console = Console()


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--user",
        type=str,
        default=config.get_default_user_id(),
        help="User id whose plans to operate on (default: $STUDYPLAN_USER_ID)"
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=config.get_data_dir(),
        help="Root of the per-user data directories"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )


def configure_logging(args: argparse.Namespace) -> None:
    if args.debug:
        log_level = logging.DEBUG
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    elif args.verbose:
        log_level = logging.INFO
        log_format = "%(asctime)s - %(levelname)s - %(message)s"
    else:
        log_level = logging.WARNING
        log_format = "%(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


def exit_on_error(result: dict) -> None:
    """Print an action's error result and exit with status 1."""
    if result["status"] != "success":
        console.print(f"[red]✗ {result['message']}[/red] ({result['error_type']})")
        sys.exit(1)

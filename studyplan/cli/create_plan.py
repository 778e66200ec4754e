"""CLI to create an empty study plan."""
import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from studyplan import config
from studyplan.actions.server_actions import create_plan
from studyplan.cli.common import add_common_arguments, configure_logging, console, exit_on_error


def main():
    load_dotenv()
    parser = argparse.ArgumentParser(description="Create a study plan")
    parser.add_argument("name", type=str, help="Plan name (also determines the file name)")
    parser.add_argument("--observations", type=str, default="", help="Free-text notes")
    parser.add_argument("--cargo", type=str, default="", help="Target job role")
    parser.add_argument("--edital", type=str, default="", help="Reference to the exam syllabus")
    parser.add_argument("--icon", type=Path, help="Image file to use as the plan icon")
    parser.add_argument(
        "--public-dir",
        type=Path,
        default=config.get_public_dir(),
        help="Directory of statically served assets (icons go to <public>/plan-icons)"
    )
    add_common_arguments(parser)
    args = parser.parse_args()
    configure_logging(args)

    icon_content = None
    if args.icon:
        if not args.icon.is_file():
            console.print(f"[red]Error: icon file not found at {args.icon}[/red]")
            sys.exit(1)
        icon_content = args.icon.read_bytes()

    result = create_plan(
        args.user,
        args.name,
        observations=args.observations,
        cargo=args.cargo,
        edital=args.edital,
        icon_filename=args.icon.name if args.icon else None,
        icon_content=icon_content,
        data_root=args.data_dir,
        public_dir=args.public_dir,
    )
    exit_on_error(result)
    console.print(f"✓ [green]Created[/green] {result['file_name']}")


if __name__ == "__main__":
    main()

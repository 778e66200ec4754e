"""CLI tool to import scraped study guides as plans."""
import argparse
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
from rich.table import Table

from studyplan.actions.server_actions import import_guide
from studyplan.cli.common import add_common_arguments, configure_logging, console


def main():
    load_dotenv()
    parser = argparse.ArgumentParser(
        description="Import parsed study guides (JSON produced by the syllabus scraper) as plans"
    )
    parser.add_argument(
        "guides",
        type=Path,
        nargs="+",
        help="Guide JSON file(s): {name, cargo, edital, iconUrl, banca, subjects}"
    )
    add_common_arguments(parser)
    args = parser.parse_args()
    configure_logging(args)

    logger = logging.getLogger(__name__)

    table = Table(title="Guide Import Summary")
    table.add_column("Guide", style="cyan")
    table.add_column("Plan file", style="green")
    table.add_column("Subjects", style="magenta", justify="right")
    table.add_column("Topics", style="magenta", justify="right")

    failed = 0
    for guide_path in args.guides:
        console.print(f"Importing: [yellow]{guide_path.name}[/yellow]")
        try:
            guide = json.loads(guide_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.debug(f"Could not read {guide_path}", exc_info=True)
            console.print(f"  [red]✗ Could not read guide: {e}[/red]")
            failed += 1
            continue

        result = import_guide(args.user, guide, data_root=args.data_dir)
        if result["status"] != "success":
            console.print(f"  [red]✗ {result['message']}[/red]")
            failed += 1
            continue

        subjects = result["plan"]["subjects"]
        table.add_row(
            guide_path.name,
            result["file_name"],
            str(len(subjects)),
            str(sum(s.get("total_topics_count", 0) for s in subjects)),
        )

    console.print()
    console.print(table)

    if failed:
        console.print(f"\n[yellow]⚠ {failed} guide(s) failed to import[/yellow]")
        sys.exit(1)


if __name__ == "__main__":
    main()

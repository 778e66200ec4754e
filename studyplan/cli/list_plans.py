"""CLI to list a user's study plans."""
import argparse

from dotenv import load_dotenv
from rich.table import Table

from studyplan.actions.server_actions import list_plan_summaries
from studyplan.cli.common import add_common_arguments, configure_logging, console, exit_on_error


def main():
    """Print a table of plans with subject and topic counts."""
    load_dotenv()
    parser = argparse.ArgumentParser(description="List study plans")
    add_common_arguments(parser)
    args = parser.parse_args()
    configure_logging(args)

    result = list_plan_summaries(args.user, data_root=args.data_dir)
    exit_on_error(result)

    if not result["plans"]:
        console.print("No plans found. Create one with 'python -m studyplan.cli.create_plan'.")
        return

    table = Table(title=f"Plans of {args.user}")
    table.add_column("File", style="cyan")
    table.add_column("Name")
    table.add_column("Banca", style="yellow")
    table.add_column("Subjects", style="magenta", justify="right")
    table.add_column("Topics", style="magenta", justify="right")

    for plan in result["plans"]:
        table.add_row(
            plan["fileName"],
            plan["name"],
            plan["banca"] or "-",
            str(plan["subjectCount"]),
            str(plan["topicCount"]),
        )

    console.print(table)


if __name__ == "__main__":
    main()

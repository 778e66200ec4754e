"""CLI to export, restore or wipe all of a user's plans."""
import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv
from rich.prompt import Confirm

from studyplan.actions.server_actions import clear_all_data, export_full_backup, restore_full_backup
from studyplan.cli.common import add_common_arguments, configure_logging, console, exit_on_error


def main():
    load_dotenv()
    parser = argparse.ArgumentParser(description="Backup and restore study plans")
    subparsers = parser.add_subparsers(dest="command", required=True)

    export_parser = subparsers.add_parser("export", help="Write every plan to a backup file")
    export_parser.add_argument("output", type=Path, help="Backup JSON file to write")

    restore_parser = subparsers.add_parser("restore", help="Replace all plans with a backup")
    restore_parser.add_argument("input", type=Path, help="Backup JSON file to read")
    restore_parser.add_argument("--yes", action="store_true", help="Do not ask for confirmation")

    clear_parser = subparsers.add_parser("clear", help="Delete every plan and study cycle")
    clear_parser.add_argument("--yes", action="store_true", help="Do not ask for confirmation")

    for sub in (export_parser, restore_parser, clear_parser):
        add_common_arguments(sub)

    args = parser.parse_args()
    configure_logging(args)

    if args.command == "export":
        result = export_full_backup(args.user, data_root=args.data_dir)
        exit_on_error(result)
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(json.dumps(result["backup"], indent=2, ensure_ascii=False), encoding="utf-8")
        console.print(f"✓ [green]Exported[/green] {len(result['backup']['plans'])} plan(s) to {args.output}")

    elif args.command == "restore":
        if not args.input.is_file():
            console.print(f"[red]Error: backup file not found at {args.input}[/red]")
            sys.exit(1)
        try:
            backup_data = json.loads(args.input.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            console.print(f"[red]Error: backup file is not valid JSON: {e}[/red]")
            sys.exit(1)
        if not args.yes and not Confirm.ask(f"Replace ALL plans of '{args.user}' with this backup?"):
            console.print("Aborted.")
            return
        result = restore_full_backup(args.user, backup_data, data_root=args.data_dir)
        exit_on_error(result)
        console.print(f"✓ [green]Restored[/green] {result['restored']} plan(s)")

    elif args.command == "clear":
        if not args.yes and not Confirm.ask(f"Delete ALL plans and study cycles of '{args.user}'?"):
            console.print("Aborted.")
            return
        result = clear_all_data(args.user, data_root=args.data_dir)
        exit_on_error(result)
        console.print(f"✓ Deleted {result['deleted']} file(s)")


if __name__ == "__main__":
    main()

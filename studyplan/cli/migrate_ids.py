"""CLI to give legacy study records (saved before records had ids) a generated id."""
import argparse

from dotenv import load_dotenv
from tqdm import tqdm

from studyplan.actions.server_actions import list_plans, migrate_study_record_ids
from studyplan.cli.common import add_common_arguments, configure_logging, console, exit_on_error


def main():
    load_dotenv()
    parser = argparse.ArgumentParser(description="Assign ids to study records that lack one")
    parser.add_argument("--plan", type=str, help="Migrate only this plan file (default: all plans)")
    add_common_arguments(parser)
    args = parser.parse_args()
    configure_logging(args)

    if args.plan:
        plan_files = [args.plan]
    else:
        result = list_plans(args.user, data_root=args.data_dir)
        exit_on_error(result)
        plan_files = result["files"]

    if not plan_files:
        console.print("No plans found.")
        return

    stats = {"migrated": 0, "plans_changed": 0, "failed": 0}
    for file_name in tqdm(plan_files, desc="Migrating record ids", unit="plan"):
        result = migrate_study_record_ids(args.user, file_name, data_root=args.data_dir)
        if result["status"] != "success":
            tqdm.write(f"✗ {file_name}: {result['message']}")
            stats["failed"] += 1
            continue
        if result["migrated"]:
            stats["migrated"] += result["migrated"]
            stats["plans_changed"] += 1

    print("\n=== Migration Summary ===")
    print(f"Plans scanned:    {len(plan_files)}")
    print(f"Plans changed:    {stats['plans_changed']}")
    print(f"Records migrated: {stats['migrated']}")
    print(f"Failed:           {stats['failed']}")


if __name__ == "__main__":
    main()

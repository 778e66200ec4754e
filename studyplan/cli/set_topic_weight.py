"""CLI to set the user weight of a topic in a plan."""
import argparse

from dotenv import load_dotenv

from studyplan.actions.server_actions import update_topic_weight
from studyplan.cli.common import add_common_arguments, configure_logging, console, exit_on_error


def main():
    load_dotenv()
    parser = argparse.ArgumentParser(description="Set the weight of a topic")
    parser.add_argument("plan", type=str, help="Plan file name, e.g. direito-penal.json")
    parser.add_argument("subject", type=str, help="Exact subject name")
    parser.add_argument("topic", type=str, help="Exact topic text")
    parser.add_argument("weight", type=float, help="New weight")
    add_common_arguments(parser)
    args = parser.parse_args()
    configure_logging(args)

    weight = int(args.weight) if args.weight.is_integer() else args.weight
    result = update_topic_weight(args.user, args.plan, args.subject, args.topic, weight, data_root=args.data_dir)
    exit_on_error(result)
    console.print(f"✓ [green]{args.topic}[/green] ({args.subject}) weight set to {weight}")


if __name__ == "__main__":
    main()

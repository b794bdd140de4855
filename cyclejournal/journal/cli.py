"""
Cyclejournal CLI
"""
import argparse
import json
from datetime import date, datetime

from . import actions
from .data import ListJournalEntriesResponse
from ..db import SessionLocal
from ..preferences import actions as preferences_actions
from ..preferences.data import PreferencesResponse
from ..questions.actions import ordered_questions
from ..questions.data import OrderedQuestionsResponse
from ..utils.confparse import question_catalog
from ..widget.actions import snapshot_as_json_dict, sync_widget


def today_handler(args: argparse.Namespace) -> None:
    """
    Handler for "today" subcommand.
    """
    session = SessionLocal()
    try:
        now = datetime.now()
        preferences_actions.ensure_start_date(session, now.date())
        config = preferences_actions.load_config(session)
        day_resolver = actions.resolver_for_config(config, question_catalog())
        if args.answer is not None:
            actions.save_answer(session, day_resolver, args.answer, now=now)
        print(actions.get_today(session, day_resolver, now=now).model_dump_json())
    finally:
        session.close()


def entries_list_handler(args: argparse.Namespace) -> None:
    """
    Handler for "entries list" subcommand.
    """
    session = SessionLocal()
    try:
        if args.question is not None:
            entries = actions.get_entries_by_question(session, args.question)
        elif args.start is not None or args.end is not None:
            entries = actions.get_entries_in_range(
                session,
                args.start if args.start is not None else date.min,
                args.end if args.end is not None else date.max,
            )
        else:
            entries = actions.get_all_entries(session)
        print(
            ListJournalEntriesResponse(
                entries=[actions.entry_as_response(entry) for entry in entries]
            ).model_dump_json()
        )
    finally:
        session.close()


def entries_month_handler(args: argparse.Namespace) -> None:
    """
    Handler for "entries month" subcommand.
    """
    session = SessionLocal()
    try:
        print(actions.calendar_month(session, args.year, args.month).model_dump_json())
    finally:
        session.close()


def questions_list_handler(args: argparse.Namespace) -> None:
    session = SessionLocal()
    try:
        config = preferences_actions.load_config(session)
        print(
            OrderedQuestionsResponse(
                questions=ordered_questions(
                    question_catalog(),
                    config.question_order,
                    config.question_overrides,
                )
            ).model_dump_json()
        )
    finally:
        session.close()


def questions_reset_handler(args: argparse.Namespace) -> None:
    session = SessionLocal()
    try:
        order = preferences_actions.reset_question_order(session)
        print(json.dumps({"order": order}))
    finally:
        session.close()


def config_show_handler(args: argparse.Namespace) -> None:
    session = SessionLocal()
    try:
        config = preferences_actions.load_config(session)
        print(
            PreferencesResponse(
                start_date=config.start_date,
                passcode_enabled=config.passcode_enabled,
                question_order=config.question_order,
                question_overrides=config.question_overrides,
            ).model_dump_json()
        )
    finally:
        session.close()


def widget_export_handler(args: argparse.Namespace) -> None:
    """
    Handler for "widget export" subcommand. Publishes to the widget channel if it is configured.
    """
    session = SessionLocal()
    try:
        snapshot = sync_widget(session)
        print(json.dumps(snapshot_as_json_dict(snapshot)))
    finally:
        session.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Cyclejournal CLI")
    parser.set_defaults(func=lambda _: parser.print_help())
    subcommands = parser.add_subparsers(description="Cyclejournal commands")

    parser_today = subcommands.add_parser(
        "today", description="Question of the day and today's entry"
    )
    parser_today.add_argument(
        "-a",
        "--answer",
        help="Save this answer for today before printing",
    )
    parser_today.set_defaults(func=today_handler)

    # Entries module
    parser_entries = subcommands.add_parser("entries", description="Journal entries")
    parser_entries.set_defaults(func=lambda _: parser_entries.print_help())
    subcommands_entries = parser_entries.add_subparsers(
        description="Journal entries commands"
    )
    parser_entries_list = subcommands_entries.add_parser(
        "list", description="List journal entries"
    )
    parser_entries_list.add_argument(
        "-q", "--question", type=int, help="Only answers to this question id"
    )
    parser_entries_list.add_argument(
        "-s",
        "--start",
        type=date.fromisoformat,
        help="First day to include (YYYY-MM-DD)",
    )
    parser_entries_list.add_argument(
        "-e",
        "--end",
        type=date.fromisoformat,
        help="First day to exclude (YYYY-MM-DD)",
    )
    parser_entries_list.set_defaults(func=entries_list_handler)

    parser_entries_month = subcommands_entries.add_parser(
        "month", description="Calendar summary of a month"
    )
    parser_entries_month.add_argument("-y", "--year", type=int, required=True)
    parser_entries_month.add_argument(
        "-m", "--month", type=int, required=True, choices=range(1, 13)
    )
    parser_entries_month.set_defaults(func=entries_month_handler)

    # Questions module
    parser_questions = subcommands.add_parser("questions", description="Questions")
    parser_questions.set_defaults(func=lambda _: parser_questions.print_help())
    subcommands_questions = parser_questions.add_subparsers(
        description="Questions commands"
    )
    parser_questions_list = subcommands_questions.add_parser(
        "list", description="Questions in the order they are asked"
    )
    parser_questions_list.set_defaults(func=questions_list_handler)
    parser_questions_reset = subcommands_questions.add_parser(
        "reset", description="Restore the default question order"
    )
    parser_questions_reset.set_defaults(func=questions_reset_handler)

    # Config module
    parser_config = subcommands.add_parser("config", description="Journal preferences")
    parser_config.set_defaults(func=lambda _: parser_config.print_help())
    subcommands_config = parser_config.add_subparsers(description="Config commands")
    parser_config_show = subcommands_config.add_parser(
        "show", description="Show journal preferences"
    )
    parser_config_show.set_defaults(func=config_show_handler)

    # Widget module
    parser_widget = subcommands.add_parser("widget", description="Widget summary")
    parser_widget.set_defaults(func=lambda _: parser_widget.print_help())
    subcommands_widget = parser_widget.add_subparsers(description="Widget commands")
    parser_widget_export = subcommands_widget.add_parser(
        "export", description="Export the widget summary"
    )
    parser_widget_export.set_defaults(func=widget_export_handler)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()

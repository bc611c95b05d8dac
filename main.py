"""Bible reading plan tracker.

Show today's reading:
    python main.py today

Start a plan, mark the assignment as read, undo it:
    python main.py start chapters-2
    python main.py mark
    python main.py undo
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from reading_plan.constants import SECTIONS
from reading_plan.db import ScheduleStore
from reading_plan.errors import ReadingPlanError
from reading_plan.parser import format_reference
from reading_plan.schedule import PLAN_PRESETS, STYLE_CUSTOM, find_preset
from reading_plan.state import AppState, StateStore
from reading_plan.tracker import ReadingTracker


def _print_assignment(tracker: ReadingTracker) -> None:
    schedule = tracker.schedule
    if schedule is None:
        print("No reading plan. Start one with: main.py start <preset>")
        return
    print(f"Plan: {schedule.style_type} ({schedule.status})")
    print(
        f"Progress: {schedule.chapters_read_count}/{schedule.total_chapters_in_bible} "
        f"chapters ({schedule.progress_percent:.1f}%)"
    )
    streak = tracker.streak()
    print(f"Streak: {streak} day{'s' if streak != 1 else ''}"
          f"{' (read today)' if tracker.read_today() else ''}")
    pace = tracker.pace()
    if pace.days_difference:
        print(f"Pace: {pace.status} ({pace.days_difference:+d} days)")
    else:
        print(f"Pace: {pace.status}")
    if tracker.assignment:
        print("Next: " + ", ".join(format_reference(key) for key in tracker.assignment))
    elif schedule.status == "completed":
        print("Plan completed.")


def _sync_undo(state: AppState, tracker: ReadingTracker) -> None:
    if tracker.last_marked_batch and tracker.schedule is not None:
        state.last_marked_batch = list(tracker.last_marked_batch)
        state.last_marked_schedule_id = tracker.schedule.id
        state.last_marked_revision = tracker.schedule.revision
    else:
        state.clear_undo()


def cmd_plans(args: argparse.Namespace, tracker: ReadingTracker) -> int:
    for preset in PLAN_PRESETS:
        print(f"{preset.id:<18} {preset.title} - {preset.description}")
    print(f"{'custom':<18} --book <abbrev> --chapters <n>")
    return 0


def cmd_books(args: argparse.Namespace, tracker: ReadingTracker) -> int:
    reference = tracker.orders.reference
    completed = tracker.schedule.completed_chapters if tracker.schedule else set()
    for book in reference.book_list():
        done = " (done)" if reference.completed_book(book.abbrev, completed) else ""
        print(f"{book.abbrev:<5} {book.name} ({book.chapters}){done}")
    if tracker.schedule is None:
        return 0
    print()
    for section in SECTIONS:
        chapters = reference.chapters_for_section(section)
        if reference.completed_section(section, completed):
            print(f"{section}: complete")
        else:
            read = sum(1 for key in chapters if key in completed)
            print(f"{section}: {read}/{len(chapters)} chapters")
    return 0


def cmd_start(args: argparse.Namespace, tracker: ReadingTracker) -> int:
    if args.preset == "custom":
        if not args.book:
            print("custom plans need --book", file=sys.stderr)
            return 2
        tracker.start_plan(STYLE_CUSTOM, {"chapters": args.chapters, "start_book_abbrev": args.book})
    else:
        preset = find_preset(args.preset)
        if preset is None:
            print(f"Unknown plan {args.preset!r}; see: main.py plans", file=sys.stderr)
            return 2
        tracker.start_plan(preset.style_type, preset.style_config)
    _print_assignment(tracker)
    return 0


def cmd_today(args: argparse.Namespace, tracker: ReadingTracker) -> int:
    _print_assignment(tracker)
    return 0


def cmd_mark(args: argparse.Namespace, tracker: ReadingTracker) -> int:
    result = tracker.mark_read(args.references or None)
    for skipped in result.skipped:
        print(f"Skipped {skipped.raw!r}: {skipped.reason}")
    if result.no_op:
        print("Nothing new to record.")
    else:
        print(f"Marked {result.applied_count} chapter{'s' if result.applied_count != 1 else ''}.")
        if result.completed:
            print("Congratulations, plan completed!")
    _print_assignment(tracker)
    return 0


def cmd_undo(args: argparse.Namespace, tracker: ReadingTracker) -> int:
    if not tracker.can_undo:
        print("Nothing to undo.")
    else:
        result = tracker.undo()
        print(f"Reverted {result.reverted_count} reference{'s' if result.reverted_count != 1 else ''}.")
    _print_assignment(tracker)
    return 0


def cmd_pause(args: argparse.Namespace, tracker: ReadingTracker) -> int:
    tracker.pause()
    print("Plan paused.")
    return 0


def cmd_resume(args: argparse.Namespace, tracker: ReadingTracker) -> int:
    tracker.resume()
    _print_assignment(tracker)
    return 0


def cmd_delete(args: argparse.Namespace, tracker: ReadingTracker) -> int:
    tracker.delete()
    print("Plan deleted.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Bible reading plan tracker")
    parser.add_argument("--home", type=Path, help="Directory for settings and the database")
    parser.add_argument("--db", help="SQLite database path")
    parser.add_argument("--user", help="User id (defaults to the one in settings)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("plans", help="List available plans").set_defaults(func=cmd_plans)
    commands.add_parser("books", help="List books and abbreviations").set_defaults(func=cmd_books)

    start = commands.add_parser("start", help="Start a reading plan")
    start.add_argument("preset", help="Plan id from 'plans', or 'custom'")
    start.add_argument("--book", help="Start book abbreviation for custom plans")
    start.add_argument("--chapters", type=int, default=1, help="Chapters per day for custom plans")
    start.set_defaults(func=cmd_start)

    commands.add_parser("today", help="Show the current assignment").set_defaults(func=cmd_today)

    mark = commands.add_parser("mark", help="Mark chapters as read")
    mark.add_argument(
        "references",
        nargs="*",
        help="References such as 'Gênesis 3' or 'gn-3' (default: current assignment)",
    )
    mark.set_defaults(func=cmd_mark)

    commands.add_parser("undo", help="Revert the last marked batch").set_defaults(func=cmd_undo)
    commands.add_parser("pause", help="Pause the active plan").set_defaults(func=cmd_pause)
    commands.add_parser("resume", help="Resume a paused plan").set_defaults(func=cmd_resume)
    commands.add_parser("delete", help="Delete the current plan").set_defaults(func=cmd_delete)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    state_store = StateStore(args.home)
    try:
        state = state_store.load()
        if args.user:
            state.user_id = args.user
        store = ScheduleStore(state_store.db_path(state, args.db))
    except ReadingPlanError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    try:
        tracker = ReadingTracker(store, state.user_id)
        tracker.restore_undo(
            state.last_marked_batch,
            state.last_marked_schedule_id,
            state.last_marked_revision,
        )
        code = args.func(args, tracker)
        _sync_undo(state, tracker)
        state_store.save(state)
        return code
    except ReadingPlanError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        store.close()


if __name__ == "__main__":
    sys.exit(main())

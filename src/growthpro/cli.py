"""Summary: Command-line interface for GrowthPro messaging.

Importance: Provides a local entry point for staff and client messaging workflows.
Alternatives: Use the HTTP API or the dashboard only.
"""

from __future__ import annotations

import argparse
import logging
import sys

from growthpro.app import build_context
from growthpro.config import AppConfig
from growthpro.errors import MessagingError, ValidationError
from growthpro.models import MessageThread, Participant


def build_parser() -> argparse.ArgumentParser:
    """Summary: Build the CLI argument parser.

    Importance: Defines supported commands for local operation.
    Alternatives: Use a CLI framework like Typer or Click.
    """

    parser = argparse.ArgumentParser(description="GrowthPro messaging CLI")
    parser.add_argument("--as", dest="viewer", type=str, default=None, help="Viewer profile ID")
    subparsers = parser.add_subparsers(dest="command", required=True)

    add_profile = subparsers.add_parser("add-profile", help="Create or update a profile")
    add_profile.add_argument("profile_id", type=str)
    add_profile.add_argument("full_name", type=str)
    add_profile.add_argument("email", type=str)
    add_profile.add_argument(
        "--role", type=str, default="client", choices=["client", "admin", "super_admin"]
    )

    list_profiles = subparsers.add_parser("list-profiles", help="List profiles")
    list_profiles.add_argument("--role", type=str, default=None)

    send = subparsers.add_parser("send", help="Send a direct message")
    send.add_argument("subject", type=str)
    send.add_argument("content", type=str)
    send.add_argument("--to", dest="recipients", action="append", default=[])
    send.add_argument("--priority", type=str, default="normal", choices=["low", "normal", "high"])
    send.add_argument("--thread", type=str, default=None)

    broadcast = subparsers.add_parser("broadcast", help="Broadcast a message to clients")
    broadcast.add_argument("subject", type=str)
    broadcast.add_argument("content", type=str)
    broadcast.add_argument("--to", dest="recipients", action="append", default=[])
    broadcast.add_argument("--priority", type=str, default="normal", choices=["low", "normal", "high"])

    list_messages = subparsers.add_parser("list-messages", help="List messages")
    list_messages.add_argument("--limit", type=int, default=20)

    subparsers.add_parser("threads", help="List threads")
    thread = subparsers.add_parser("thread", help="Open a thread and mark it read")
    thread.add_argument("thread_id", type=str)

    subparsers.add_parser("conversations", help="List conversations (staff only)")
    conversation = subparsers.add_parser("conversation", help="Show messages with one participant")
    conversation.add_argument("participant_id", type=str)

    mark_read = subparsers.add_parser("mark-read", help="Mark a message read")
    mark_read.add_argument("message_id", type=str)

    subparsers.add_parser("stats", help="Show message stats")
    subparsers.add_parser("rate-limit", help="Show remaining hourly quota")

    welcome = subparsers.add_parser("send-welcome", help="Send a welcome email to a profile")
    welcome.add_argument("profile_id", type=str)
    welcome.add_argument("--password", type=str, default=None)

    return parser


def run_cli(argv: list[str] | None = None) -> int:
    """Summary: Execute CLI commands based on arguments.

    Importance: Drives messaging workflows without the dashboard.
    Alternatives: Invoke services via the HTTP API.
    """

    parser = build_parser()
    args = parser.parse_args(argv)
    config = AppConfig.from_env()
    logging.basicConfig(level=config.log_level, format="%(levelname)s %(name)s: %(message)s")
    context = build_context(config)

    if args.command == "add-profile":
        context.store.upsert_profile(
            Participant(id=args.profile_id, full_name=args.full_name, email=args.email, role=args.role)
        )
        print(f"Saved profile {args.profile_id} ({args.role}).")
        return 0

    if args.command == "list-profiles":
        for profile in context.store.list_profiles(args.role):
            print(f"{profile.id}: {profile.full_name} <{profile.email}> [{profile.role}]")
        return 0

    if not args.viewer:
        parser.error("--as is required for messaging commands")
    try:
        services = context.services_for_viewer(args.viewer)
    except LookupError as exc:
        parser.error(str(exc))
    messaging = services.messaging

    if args.command in {"send", "broadcast"}:
        messaging.fetch_rate_limit()
        composer = services.composer(reply_to_thread=getattr(args, "thread", None))
        composer.set_subject(args.subject)
        composer.set_content(args.content)
        composer.select_recipients(args.recipients)
        composer.draft.priority = args.priority
        composer.draft.message_type = "broadcast" if args.command == "broadcast" else "direct"
        try:
            sent = composer.send()
        except ValidationError as exc:
            _print_errors(exc.errors)
            return 2
        except MessagingError as exc:
            print(f"Send failed: {exc}", file=sys.stderr)
            return 1
        if sent is None:
            _print_errors(composer.errors)
            return 2
        for message in sent:
            print(f"Sent {message.id} (thread {message.thread_id}).")
        return 0

    if args.command == "list-messages":
        for message in messaging.fetch_messages()[: args.limit]:
            marker = " " if message.is_read else "*"
            sender = message.sender.full_name if message.sender else message.sender_id
            print(f"{marker} {message.id}: {message.subject} ({sender}, {message.message_type})")
        return 0 if messaging.state.status != "error" else 1

    if args.command == "threads":
        for item in messaging.fetch_threads():
            names = ", ".join(participant.full_name for participant in item.participants)
            print(f"{item.id}: {item.subject} [{item.unread_count} unread] ({names})")
        return 0

    if args.command == "thread":
        messaging.fetch_threads()
        opened = messaging.open_thread(args.thread_id)
        if opened is None:
            print("Thread not found.", file=sys.stderr)
            return 1
        _print_thread(opened)
        return 0

    if args.command == "conversations":
        if not services.viewer.is_admin:
            print("Only staff members can list conversations.", file=sys.stderr)
            return 1
        for summary in messaging.fetch_conversations():
            print(
                f"{summary.participant_id}: {summary.participant_name} "
                f"[{summary.unread_count} unread] {summary.last_message_content}"
            )
        return 0

    if args.command == "conversation":
        found = messaging.get_thread(args.participant_id)
        if found is None:
            print("No messages with that participant.", file=sys.stderr)
            return 1
        _print_thread(found)
        return 0

    if args.command == "mark-read":
        changed = messaging.mark_as_read(args.message_id)
        print("Marked read." if changed else "Nothing to update.")
        return 0

    if args.command == "stats":
        messaging.fetch_messages()
        messaging.fetch_conversations()
        snapshot = messaging.fetch_stats()
        for key in ("total", "unread", "sent", "threads", "conversations"):
            print(f"{key}: {getattr(snapshot, key)}")
        return 0

    if args.command == "rate-limit":
        info = messaging.fetch_rate_limit()
        if info is None:
            print("Rate limit unavailable.", file=sys.stderr)
            return 1
        print(f"remaining: {info.remaining}/{config.hourly_message_limit} (resets {info.reset_at.isoformat()})")
        return 0

    if args.command == "send-welcome":
        if not services.viewer.is_admin:
            print("Only staff members can send welcome emails.", file=sys.stderr)
            return 1
        profile = context.store.get_profile(args.profile_id)
        if profile is None:
            print("Profile not found.", file=sys.stderr)
            return 1
        result = services.welcome.send(profile.email, profile.full_name, args.password)
        print("Welcome email sent." if result.success else f"Welcome email failed: {result.error}")
        return 0 if result.success else 1

    return 0


def _print_errors(errors: dict[str, str]) -> None:
    for field_name, text in errors.items():
        print(f"{field_name}: {text}", file=sys.stderr)


def _print_thread(thread: MessageThread) -> None:
    print(thread.subject)
    for message in thread.messages:
        sender = message.sender.full_name if message.sender else message.sender_id
        print(f"  [{message.created_at.isoformat()}] {sender}: {message.content}")


def main() -> None:
    sys.exit(run_cli())


if __name__ == "__main__":
    main()

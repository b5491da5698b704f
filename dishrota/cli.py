"""Command line front end for the dishwasher rotation."""

import argparse
import logging
from datetime import datetime, time
from pathlib import Path

from . import ledger, rotation, schedule
from .audit import AuditLogger
from .config import RemoteSyncConfig, Settings
from .coordinator import CLAIM_ACTIONS, ActionCoordinator, CompletionReceipt
from .credentials import PromptCredentialSource, StaticCredentialSource
from .errors import RotaError
from .models.state import HouseholdState
from .store import StateStore

KIND_LABELS = {"afternoon": "Afternoon", "night": "Night"}


def format_status(state: HouseholdState) -> str:
    """Queue, paused members and credits as printable text."""
    current = rotation.current_assignee(state)
    upcoming = rotation.next_assignee(state)
    lines = [f"Current: {current or 'none'}  Next: {upcoming or 'none'}", "Queue:"]
    for position, name in enumerate(rotation.active_queue(state)):
        lines.append(f"  {position}. {name}")
    held = rotation.paused_queue(state)
    if held:
        lines.append(f"Paused: {', '.join(held)}")
    lines.append("Credits:")
    for name, credit in ledger.standings(state):
        lock = " (PIN)" if state.pin_for(name) else ""
        lines.append(f"  {name}: {credit:.1f}{lock}")
    lines.append("Schedule:")
    lines.extend(f"  {line}" for line in schedule.schedule_lines())
    return "\n".join(lines)


def format_history(state: HouseholdState, limit: int) -> str:
    rows = ledger.recent_history(state, limit)
    if not rows:
        return "No loads recorded yet"
    lines = []
    for entry in rows:
        stamp = entry.timestamp.astimezone().strftime("%Y-%m-%d %H:%M")
        lines.append(
            f"{stamp}  {KIND_LABELS[entry.kind]:<9}  ran: {entry.ran_by:<12} "
            f"unloaded: {entry.unloaded_by:<12} +{entry.run_credit}+{entry.unload_credit}"
        )
    return "\n".join(lines)


def _receipt_message(receipt: CompletionReceipt) -> str:
    kind = KIND_LABELS[receipt.entry.kind]
    return (
        f"{kind} load recorded: ran by {receipt.ran_by}, unloaded by {receipt.unloaded_by}. "
        f"Next up: {receipt.next_assignee or 'none'}"
    )


def _with_warning(message: str, now: datetime | time | None) -> str:
    warning = schedule.brunch_warning(now) if now is not None else None
    return f"{warning}\n{message}" if warning else message


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dishrota",
        description="Dishwasher rotation by load, with credit split and PINs",
    )
    parser.add_argument(
        "--state",
        type=Path,
        default=None,
        help="Path to the state JSON file (default: $DISHROTA_STATE_PATH)",
    )
    parser.add_argument(
        "--audit-log",
        type=Path,
        default=None,
        help="Path to the audit log file (default: $DISHROTA_AUDIT_LOG)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("status", help="Show queue, paused members and credits")

    roster = sub.add_parser("roster", help="Replace the roster")
    roster.add_argument("names", help="Comma-separated names, e.g. 'Alex, Brooke, Casey'")

    reorder = sub.add_parser("reorder", help="Move a member within the active queue")
    reorder.add_argument("from_index", type=int)
    reorder.add_argument("to_index", type=int)

    pause = sub.add_parser("pause", help="Pause or unpause a member")
    pause.add_argument("name")

    pin = sub.add_parser("pin", help="Set or clear a member's PIN")
    pin.add_argument("name")
    pin.add_argument("pin", nargs="?", default=None, help="4-8 digits; prompted if omitted")
    pin.add_argument("--clear", action="store_true", help="Remove the PIN")

    complete = sub.add_parser("complete", help="Record a load (prompts for missing values)")
    complete.add_argument("kind", choices=sorted(KIND_LABELS))
    complete.add_argument("--ran-by", default=None)
    complete.add_argument("--unloaded-by", default=None)
    complete.add_argument("--pin", default=None, help="Runner's PIN")
    complete.add_argument("--unloader-pin", default=None, help="Unloader's PIN")
    complete.add_argument(
        "--no-input", action="store_true", help="Never prompt; use defaults for missing names"
    )

    claim = sub.add_parser("claim", help="Quick claim a run or an unload")
    claim.add_argument("name")
    claim.add_argument("action", choices=CLAIM_ACTIONS)
    claim.add_argument("kind", choices=sorted(KIND_LABELS))
    claim.add_argument("--pin", default=None)

    reset = sub.add_parser("reset", help="Reset all credits to 0")
    reset.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")

    history = sub.add_parser("history", help="Show recent loads")
    history.add_argument("--limit", type=int, default=20)

    audit = sub.add_parser("audit", help="Show recent audit entries")
    audit.add_argument("--limit", type=int, default=20)

    sub.add_parser("config-script", help="Print the remote-sync runtime config script")
    return parser


class CommandLineSource(PromptCredentialSource):
    """Uses names and PINs given as options, prompting for the rest.

    PIN options belong to a role, so ``--pin`` also covers a runner that
    was left to the queue default. With ``interactive`` off, missing names
    take the default and missing PINs decline.
    """

    def __init__(self, args: argparse.Namespace, interactive: bool = True) -> None:
        super().__init__(title=f"{KIND_LABELS[args.kind].upper()} LOAD")
        self.interactive = interactive
        self.given = {"run": args.ran_by, "unload": args.unloaded_by}
        self.role_pins = {"run": args.pin, "unload": args.unloader_pin}
        self.entered: dict[str, str] = {}
        self.role = "run"

    def identify(self, role: str, default: str) -> str | None:
        self.role = role
        if self.given.get(role):
            return self.given[role]
        if not self.interactive:
            return ""
        return super().identify(role, default)

    def secret_for(self, name: str) -> str | None:
        secret = self.role_pins.get(self.role)
        if secret is None:
            secret = self.entered.get(name)
        if secret is None and self.interactive:
            secret = super().secret_for(name)
        if secret is not None:
            self.entered[name] = secret
        return secret


def run_command(
    args: argparse.Namespace,
    coordinator: ActionCoordinator,
    now: datetime | time | None = None,
) -> str:
    """Execute one parsed command and return the text to print.

    Recording a load at ``now`` inside the brunch buffer still succeeds,
    with a warning line ahead of the receipt.
    """
    command = args.command

    if command == "status":
        return format_status(coordinator.state)

    if command == "roster":
        state = coordinator.set_roster(rotation.parse_roster(args.names))
        return f"Roster: {', '.join(state.roster)}"

    if command == "reorder":
        state = coordinator.reorder(args.from_index, args.to_index)
        return format_status(state)

    if command == "pause":
        state = coordinator.toggle_pause(args.name)
        verb = "Paused" if state.is_paused(args.name) else "Unpaused"
        return f"{verb} {args.name}"

    if command == "pin":
        if args.clear:
            candidate = ""
        elif args.pin is not None:
            candidate = args.pin
        else:
            candidate = PromptCredentialSource().secret_for(args.name)
            if candidate is None:
                return "PIN unchanged"
        state = coordinator.set_pin(args.name, candidate)
        return f"PIN {'set' if state.pin_for(args.name) else 'cleared'} for {args.name}"

    if command == "complete":
        receipt = coordinator.complete_load(
            args.kind, CommandLineSource(args, interactive=not args.no_input)
        )
        return _with_warning(_receipt_message(receipt), now)

    if command == "claim":
        receipt = coordinator.quick_claim(args.kind, args.name, args.action, args.pin)
        return _with_warning(_receipt_message(receipt), now)

    if command == "reset":
        source = StaticCredentialSource(confirmed=True) if args.yes else PromptCredentialSource()
        coordinator.reset_credits(source)
        return "Credits reset"

    if command == "history":
        return format_history(coordinator.state, args.limit)

    if command == "audit":
        if coordinator.audit is None:
            return "Audit log disabled"
        return "\n".join(coordinator.audit.tail(args.limit)) or "Audit log is empty"

    raise RotaError(f"Unknown command: {command}")


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for dishrota."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=Settings.get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "config-script":
        print(RemoteSyncConfig.from_env().to_runtime_script())
        return

    state_path = args.state or Settings.STATE_PATH
    audit_path = args.audit_log or Settings.AUDIT_LOG

    try:
        coordinator = ActionCoordinator(StateStore.at_path(state_path), AuditLogger(audit_path))
        print(run_command(args, coordinator, now=schedule.local_now()))
    except RotaError as e:
        print(f"Error: {e}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()

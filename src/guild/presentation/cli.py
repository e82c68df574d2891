"""Text front end for the guild: renders state and forwards commands."""

from __future__ import annotations

import logging
import shlex
from pathlib import Path
from typing import Callable, List, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from guild.application.dtos import ActionResult, AdventurerView
from guild.application.services.guild_service import GuildService
from guild.domain.models.adventurer import GIFT_TYPES
from guild.infrastructure.save_file.json_save_file import SaveFileError


logger = logging.getLogger(__name__)

FRAME_MS = 100
_TITLE = "[bold yellow]Guild Master[/bold yellow]"

HELP_LINES = (
    "status | board | active | roster | recruits | log",
    "start <quest> | upgrade <quest> | unlock <quest>",
    "hire <recruit#> | assign <adventurer#> <quest> | manage <quest>",
    f"gift <adventurer#> <{'|'.join(GIFT_TYPES)}>",
    "wait <seconds> | speed <scale>",
    "save | export [path] | import [path] | help | quit",
)


def render_status(service: GuildService, console: Console) -> None:
    view = service.status_view()
    console.print(
        Panel.fit(
            f"Gold: {view.gold}   Influence: {view.influence}   Fame: {view.guild_fame}\n"
            f"Location: {view.location_name}   Active quests: {view.active_quest_count}   "
            f"Adventurers: {view.roster_size}   Speed: x{view.time_scale:g}",
            title=_TITLE,
            border_style="yellow",
        )
    )


def render_quest_board(service: GuildService, console: Console, *, active_only: bool = False) -> None:
    quests = service.active_quests_view() if active_only else service.quest_board_view()
    if active_only and not quests:
        console.print("No active quests. Visit the Quest Board to start one!")
        return

    table = Table(title="Active Quests" if active_only else "Quest Board")
    table.add_column("Quest")
    table.add_column("Reward", justify="right")
    table.add_column("Level", justify="right")
    table.add_column("Time", justify="right")
    table.add_column("Progress", justify="right")
    table.add_column("Upgrade / Unlock")
    table.add_column("Manager")
    for quest in quests:
        if quest.unlocked:
            cost = f"upgrade {quest.upgrade_cost}g"
        else:
            cost = f"unlock {quest.unlock_cost}g"
        progress = f"{quest.progress_percent:.0f}% ({quest.seconds_left}s)" if quest.running else "-"
        table.add_row(
            f"{quest.name} [dim]({quest.id})[/dim]",
            f"{quest.reward}g",
            str(quest.level),
            f"{quest.base_time_seconds:g}s",
            progress,
            cost,
            quest.manager_name or ("Managed" if quest.managed else "-"),
        )
    console.print(table)


def render_adventurers(views: Sequence[AdventurerView], console: Console, *, title: str, empty: str) -> None:
    if not views:
        console.print(empty)
        return
    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("Name")
    table.add_column("Class")
    table.add_column("STR/AGI/INT/CHA")
    table.add_column("Traits")
    table.add_column("Affection", justify="right")
    table.add_column("Status")
    for index, view in enumerate(views, start=1):
        status = view.assignment_label if view.hired else f"Hire ({view.hire_cost} gold)"
        table.add_row(
            str(index),
            view.name,
            view.title,
            f"{view.strength}/{view.agility}/{view.intellect}/{view.charisma}",
            ", ".join(view.traits),
            str(view.affection),
            status,
        )
    console.print(table)


def _pick(views: Sequence[AdventurerView], token: str) -> str | None:
    if token.isdigit():
        index = int(token) - 1
        if 0 <= index < len(views):
            return views[index].id
        return None
    for view in views:
        if view.id == token:
            return view.id
    return None


def _report(result: ActionResult, console: Console) -> None:
    style = "green" if result.ok else "red"
    for message in result.messages:
        console.print(f"[{style}]{message}[/{style}]")


def simulate(service: GuildService, elapsed_ms: float, frame_ms: int = FRAME_MS) -> int:
    """Feed wall time to the engine in frame-sized slices, like a render loop."""
    paid = 0
    remaining = max(0.0, float(elapsed_ms))
    while remaining > 0:
        step = min(float(frame_ms), remaining)
        paid += service.advance(step)
        remaining -= step
    return paid


def handle_command(service: GuildService, line: str, console: Console, *, default_save_path: Path) -> bool:
    """Run one command. Returns False when the session should end."""
    try:
        parts: List[str] = shlex.split(line)
    except ValueError:
        console.print("[red]Could not parse that command.[/red]")
        return True
    if not parts:
        return True

    command, args = parts[0].lower(), parts[1:]

    if command in {"quit", "exit"}:
        try:
            service.save()
        except SaveFileError as exc:
            console.print(f"[red]Save failed, staying open! ({escape(str(exc))})[/red]")
            return True
        console.print("Guild saved. Farewell!")
        return False
    if command == "help":
        for help_line in HELP_LINES:
            console.print(help_line)
    elif command == "status":
        render_status(service, console)
    elif command == "board":
        render_quest_board(service, console)
    elif command == "active":
        render_quest_board(service, console, active_only=True)
    elif command == "roster":
        render_adventurers(
            service.roster_view(),
            console,
            title="Adventurers",
            empty="No adventurers hired yet. Visit Recruitment to hire some!",
        )
    elif command == "recruits":
        render_adventurers(service.recruitment_view(), console, title="Recruitment", empty="Nobody is looking for work.")
    elif command == "log":
        entries = service.recent_activity()
        if not entries:
            console.print("Nothing has happened yet.")
        for entry in entries[-10:]:
            console.print(entry, markup=False)
    elif command in {"start", "upgrade", "unlock", "manage"} and len(args) == 1:
        action = {
            "start": service.start_quest,
            "upgrade": service.upgrade_quest,
            "unlock": service.unlock_quest,
            "manage": service.assign_first_available,
        }[command]
        _report(action(args[0]), console)
    elif command == "hire" and len(args) == 1:
        recruit_id = _pick(service.recruitment_view(), args[0])
        _report(service.hire_adventurer(recruit_id or args[0]), console)
    elif command == "assign" and len(args) == 2:
        adventurer_id = _pick(service.roster_view(), args[0])
        _report(service.assign_adventurer(adventurer_id or args[0], args[1]), console)
    elif command == "gift" and len(args) == 2:
        adventurer_id = _pick(service.roster_view(), args[0]) or _pick(service.recruitment_view(), args[0])
        _report(service.give_gift(adventurer_id or args[0], args[1].upper()), console)
    elif command == "wait" and len(args) == 1:
        try:
            seconds = float(args[0])
        except ValueError:
            console.print("[red]wait needs a number of seconds.[/red]")
            return True
        paid = simulate(service, seconds * 1000)
        console.print(f"Time passes... quests paid out {paid} gold.")
    elif command == "speed" and len(args) == 1:
        try:
            scale = float(args[0])
        except ValueError:
            scale = -1.0
        if scale < 0:
            console.print("[red]speed needs a non-negative number.[/red]")
        else:
            service.state.time.time_scale = scale
            console.print(f"Time scale set to x{scale:g}.")
    elif command == "save":
        try:
            service.save()
        except SaveFileError as exc:
            console.print(f"[red]Save failed! ({escape(str(exc))})[/red]")
        else:
            console.print("Game saved!")
    elif command == "export":
        try:
            target = service.export_save(Path(args[0]) if args else default_save_path)
        except SaveFileError as exc:
            console.print(f"[red]Export failed! ({escape(str(exc))})[/red]")
        else:
            console.print(f"Save file exported to {target}")
    elif command == "import":
        try:
            _report(service.import_save(Path(args[0]) if args else default_save_path), console)
        except SaveFileError as exc:
            console.print(f"[red]Invalid save file! ({escape(str(exc))})[/red]")
    else:
        console.print("Unknown command. Type 'help' for the list.")
    return True


def run_cli(
    service: GuildService,
    *,
    read_line: Callable[[str], str] = input,
    console: Console | None = None,
    autosave_ms: int = 30_000,
    default_save_path: Path = Path("guild_master_save.json"),
) -> None:
    console = console or Console()
    report = service.load()
    for message in report.messages:
        console.print(f"[bold green]{message}[/bold green]")
    render_status(service, console)

    last_frame = service.clock()
    while True:
        input_closed = False
        try:
            line = read_line("guild> ")
        except EOFError:
            line, input_closed = "quit", True

        now = service.clock()
        simulate(service, now - last_frame)
        last_frame = now
        try:
            service.maybe_autosave(autosave_ms)
        except SaveFileError as exc:
            logger.warning("Autosave failed: %s", exc)

        if not handle_command(service, line, console, default_save_path=default_save_path) or input_closed:
            return

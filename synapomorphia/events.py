"""
Event-subscription table owned by the plugin.

Commands, ribbon actions, event handlers, intervals and setting tabs are
registered here at load time and released together on unload, so nothing
registered by one load survives into the next.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

from synapomorphia.workspace import Editor, Workspace

logger = logging.getLogger(__name__)


@dataclass
class Command:
    id: str
    name: str
    callback: Callable[[], Any] | None = None
    editor_callback: Callable[[Editor], Any] | None = None
    check_callback: Callable[[bool], bool | None] | None = None


@dataclass
class RibbonAction:
    icon: str
    title: str
    callback: Callable[[], Any]
    classes: set[str] | None = None

    def add_class(self, name: str) -> None:
        if self.classes is None:
            self.classes = set()
        self.classes.add(name)


@dataclass
class Interval:
    callback: Callable[[], Any]
    seconds: float
    next_run: float


class EventRegistry:
    """Everything a plugin hooks into the workspace, released as one group."""

    def __init__(self, workspace: Workspace):
        self.workspace = workspace
        self.commands: dict[str, Command] = {}
        self.ribbon: list[RibbonAction] = []
        self.handlers: dict[str, list[Callable]] = {}
        self.intervals: list[Interval] = []
        self.setting_tabs: list[Any] = []

    # ── Commands ──────────────────────────────────────────────────────

    def add_command(
        self,
        id: str,
        name: str,
        callback: Callable[[], Any] | None = None,
        editor_callback: Callable[[Editor], Any] | None = None,
        check_callback: Callable[[bool], bool | None] | None = None,
    ) -> Command:
        given = [c for c in (callback, editor_callback, check_callback) if c is not None]
        if len(given) != 1:
            raise ValueError(f"Command {id!r} needs exactly one callback")
        if id in self.commands:
            raise ValueError(f"Command {id!r} is already registered")
        command = Command(id, name, callback, editor_callback, check_callback)
        self.commands[id] = command
        return command

    def is_command_available(self, id: str) -> bool:
        command = self.commands.get(id)
        if command is None:
            return False
        if command.check_callback is not None:
            return bool(command.check_callback(True))
        if command.editor_callback is not None:
            return self.workspace.active_editor is not None
        return True

    def execute_command(self, id: str) -> bool:
        """Run a command.  Returns False when it is unknown or not available."""
        if not self.is_command_available(id):
            logger.debug("Command %r not available", id)
            return False
        command = self.commands[id]
        if command.check_callback is not None:
            command.check_callback(False)
        elif command.editor_callback is not None:
            command.editor_callback(self.workspace.active_editor)
        else:
            command.callback()
        return True

    # ── Ribbon ────────────────────────────────────────────────────────

    def add_ribbon_icon(self, icon: str, title: str, callback: Callable[[], Any]) -> RibbonAction:
        action = RibbonAction(icon, title, callback)
        self.ribbon.append(action)
        return action

    def click_ribbon(self, title: str) -> bool:
        for action in self.ribbon:
            if action.title == title:
                action.callback()
                return True
        return False

    # ── Events ────────────────────────────────────────────────────────

    def on(self, event: str, handler: Callable) -> None:
        self.handlers.setdefault(event, []).append(handler)

    def trigger(self, event: str, *args) -> None:
        for handler in list(self.handlers.get(event, [])):
            handler(*args)

    # ── Intervals ─────────────────────────────────────────────────────

    def register_interval(
        self, callback: Callable[[], Any], seconds: float, now: float | None = None
    ) -> Interval:
        start = time.monotonic() if now is None else now
        interval = Interval(callback, seconds, start + seconds)
        self.intervals.append(interval)
        return interval

    def run_due(self, now: float | None = None) -> int:
        """Fire every interval whose time has come.  Returns how many ran."""
        now = time.monotonic() if now is None else now
        fired = 0
        for interval in list(self.intervals):
            if interval.next_run <= now:
                interval.callback()
                interval.next_run = now + interval.seconds
                fired += 1
        return fired

    # ── Setting tabs ──────────────────────────────────────────────────

    def add_setting_tab(self, tab) -> None:
        self.setting_tabs.append(tab)

    # ── Teardown ──────────────────────────────────────────────────────

    def release(self) -> None:
        logger.debug(
            "Releasing %d command(s), %d handler list(s), %d interval(s)",
            len(self.commands),
            len(self.handlers),
            len(self.intervals),
        )
        self.commands.clear()
        self.ribbon.clear()
        self.handlers.clear()
        self.intervals.clear()
        self.setting_tabs.clear()

import time
from enum import Enum
from sct.common.logger import log
from sct.core.config import Settings
from sct.core.history import HistoryStore
from sct.core.snapshot import SessionSnapshot
from sct.core.timer_state import TimerState


class Command(str, Enum):
    ADVANCE = "advance"
    RESET = "reset"
    VIEW_HISTORY = "view_history"
    EXIT_HISTORY_VIEW = "exit_history_view"
    SCROLL_UP = "scroll_up"
    SCROLL_DOWN = "scroll_down"
    QUIT = "quit"


# Commands that still do something while the history review is open.
_HISTORY_VIEW_COMMANDS = {Command.EXIT_HISTORY_VIEW, Command.SCROLL_UP, Command.SCROLL_DOWN, Command.QUIT}


# One practice session: the live timer, the solve history and the review-mode scroll position. This is the only
# thing allowed to mutate either of them; the UI just sends commands and reads snapshots.
class Session:

    def __init__(self, history: HistoryStore, settings: Settings | None = None, clock=time.monotonic):
        self.settings = settings or Settings()
        self.history = history
        self.timer = TimerState(self.settings, clock=clock)
        self.viewing_history = False
        self.scroll_offset = 0
        self.quitting = False

    # Applies one command. Returns whether the caller should keep ticking afterwards.
    def handle(self, command):
        if not isinstance(command, Command):
            log.debug(f"Ignored unknown command {command!r}")
            return self.timer.active
        if self.viewing_history and command not in _HISTORY_VIEW_COMMANDS:
            log.debug(f"Ignored '{command.value}' while viewing history")
            return self.timer.active

        if command is Command.ADVANCE:
            record = self.timer.advance()
            if record is not None:
                self.history.append(record)
                self.history.save()
        elif command is Command.RESET:
            self.timer.reset()
        elif command is Command.VIEW_HISTORY:
            if len(self.history) > 0:
                self.viewing_history = True
                self.scroll_offset = 0
        elif command is Command.EXIT_HISTORY_VIEW:
            self.viewing_history = False
            self.scroll_offset = 0
        elif command is Command.SCROLL_UP:
            self.scroll_offset = self.history.clamp_offset(self.scroll_offset - 1)
        elif command is Command.SCROLL_DOWN:
            self.scroll_offset = self.history.clamp_offset(self.scroll_offset + 1)
        elif command is Command.QUIT:
            self.quit()
        return self.timer.active

    def tick(self):
        return self.timer.tick()

    # Persists history synchronously and flags the session as finished.
    def quit(self):
        if self.quitting:
            return
        self.quitting = True
        self.history.save()
        log.info(f"Session quitting with {len(self.history)} solves in history")

    def snapshot(self, page_size=0):
        timer = self.timer
        penalty = timer.pending_penalty
        if not timer.active and timer.last_solve is not None:
            penalty = timer.last_solve.penalty

        page = ()
        if self.viewing_history:
            offset = self.history.clamp_offset(self.scroll_offset)
            page = tuple(enumerate(self.history.paged_view(offset, page_size), start=offset))

        return SessionSnapshot(
            phase=timer.phase,
            elapsed=timer.elapsed,
            countdown=timer.countdown,
            penalty=penalty,
            last_solve=timer.last_solve,
            last_elapsed=timer.last_elapsed,
            recent=tuple(self.history.recent_view(self.settings.recent_count)),
            viewing_history=self.viewing_history,
            page=page,
            scroll_offset=self.scroll_offset,
            total=len(self.history),
            quitting=self.quitting,
        )

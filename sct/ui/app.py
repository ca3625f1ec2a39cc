import curses
import sys
from PySide6.QtCore import QCoreApplication, QSocketNotifier, QTimer
from sct.common.logger import log
from sct.core import config
from sct.core.history import HistoryStore
from sct.core.session import Command, Session
from sct.ui import render

_CTRL_C = 3
_ESC = 27

# Key -> command tables for the two views. Anything else is ignored.
MAIN_KEYS = {
    ord(" "): Command.ADVANCE,
    ord("r"): Command.RESET,
    ord("v"): Command.VIEW_HISTORY,
    ord("q"): Command.QUIT,
    _CTRL_C: Command.QUIT,
}
HISTORY_KEYS = {
    ord("q"): Command.EXIT_HISTORY_VIEW,
    _ESC: Command.EXIT_HISTORY_VIEW,
    curses.KEY_UP: Command.SCROLL_UP,
    ord("k"): Command.SCROLL_UP,
    curses.KEY_DOWN: Command.SCROLL_DOWN,
    ord("j"): Command.SCROLL_DOWN,
    _CTRL_C: Command.QUIT,
}


def command_for_key(key, viewing_history):
    keys = HISTORY_KEYS if viewing_history else MAIN_KEYS
    return keys.get(key)


# ---------------------------------------------------------------------------
# Terminal loop
# ---------------------------------------------------------------------------

# Glues a curses screen to a Session on top of the Qt core event loop. Key presses arrive through a socket
# notifier on the input fd (stdin unless given); the tick QTimer only runs while the session is inspecting or timing
# a solve.
class TerminalApp:

    def __init__(self, app, screen, session, tick_interval_ms=30, accent=curses.A_BOLD, input_fd=None):
        self._app = app
        self.screen = screen
        self.session = session
        self._accent = accent

        # -- Tick timer, started/stopped on phase changes --
        self._timer = QTimer()
        self._timer.setInterval(tick_interval_ms)
        self._timer.timeout.connect(self._tick)

        # -- Input --
        if input_fd is None:
            input_fd = sys.stdin.fileno()
        self._notifier = QSocketNotifier(input_fd, QSocketNotifier.Type.Read)
        self._notifier.activated.connect(self._on_input)

        self._render()

    @property
    def ticking(self):
        return self._timer.isActive()

    def _sync_ticking(self, keep_ticking):
        if keep_ticking and not self._timer.isActive():
            self._timer.start()
            log.debug("Tick timer started")
        elif not keep_ticking and self._timer.isActive():
            self._timer.stop()
            log.debug("Tick timer stopped")

    def _on_input(self, *_args):
        while True:
            key = self.screen.getch()
            if key == -1:
                break
            command = command_for_key(key, self.session.viewing_history)
            if command is None:
                continue
            self._sync_ticking(self.session.handle(command))
            if self.session.quitting:
                self.stop()
                return
        self._render()

    def _tick(self):
        self._sync_ticking(self.session.tick())
        self._render()

    def _render(self):
        height, _ = self.screen.getmaxyx()
        snapshot = self.session.snapshot(render.history_page_size(height))
        render.draw(self.screen, render.build_lines(snapshot), self._accent)

    def stop(self):
        self._timer.stop()
        self._notifier.setEnabled(False)
        self._app.quit()


# Puts the real terminal into the mode the loop expects and returns the accent attribute for the timer line.
def _init_screen(screen):
    curses.raw()
    curses.set_escdelay(25)
    try:
        curses.curs_set(0)
    except curses.error:
        pass
    screen.nodelay(True)
    screen.keypad(True)

    if not curses.has_colors():
        return curses.A_BOLD
    try:
        curses.start_color()
        curses.use_default_colors()
        curses.init_pair(1, curses.COLOR_GREEN, -1)
    except curses.error:
        log.warning("Terminal refused color setup, drawing without colors")
        return curses.A_BOLD
    return curses.color_pair(1) | curses.A_BOLD


def _run(screen, session, settings):
    accent = _init_screen(screen)
    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    terminal = TerminalApp(app, screen, session, settings.tick_interval_ms, accent)
    app.exec()
    terminal.stop()
    # Covers the loop ending any way other than the quit key.
    session.quit()
    return 0


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main():
    if not sys.stdin.isatty() or not sys.stdout.isatty():
        log.error("Refusing to start without an interactive terminal")
        print("Error running program: an interactive terminal is required", file=sys.stderr)
        return 1

    settings = config.load_settings()
    history = HistoryStore()
    history.load()
    session = Session(history, settings)

    try:
        return curses.wrapper(_run, session, settings)
    except curses.error as e:
        log.error("Failed to initialize the terminal session", exc_info=True)
        print(f"Error running program: {e}", file=sys.stderr)
        return 1

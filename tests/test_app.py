"""Tests for the terminal loop glue, run headless against a fake screen.

Covers: sct.ui.app.TerminalApp
"""

import os
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from PySide6.QtCore import QCoreApplication

from sct.core.history import HistoryStore
from sct.core.session import Session
from sct.core.timer_state import Phase
from sct.ui.app import TerminalApp


class FakeClock:
    def __init__(self, t=0.0):
        self.t = t

    def __call__(self):
        return self.t

    def advance(self, dt):
        self.t += dt


class FakeScreen:
    """Just enough of a curses window for drawing and key reads."""

    def __init__(self, height=24, width=80):
        self.height = height
        self.width = width
        self.keys = []
        self.drawn = []

    def getmaxyx(self):
        return self.height, self.width

    def getch(self):
        return self.keys.pop(0) if self.keys else -1

    def erase(self):
        self.drawn = []

    def addstr(self, y, x, text, attr=0):
        self.drawn.append(text)

    def refresh(self):
        pass


class TestTerminalApp(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.qt_app = QCoreApplication.instance() or QCoreApplication([])

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.read_fd, self.write_fd = os.pipe()
        self.clock = FakeClock()
        self.session = Session(HistoryStore(Path(self.tmpdir) / "solves.json"), clock=self.clock)
        self.screen = FakeScreen()
        self.terminal = TerminalApp(self.qt_app, self.screen, self.session, input_fd=self.read_fd)

    def tearDown(self):
        self.terminal.stop()
        os.close(self.read_fd)
        os.close(self.write_fd)
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def _press(self, key):
        self.screen.keys.append(ord(key) if isinstance(key, str) else key)
        self.terminal._on_input()

    def test_renders_on_start(self):
        self.assertIn("0.00000", self.screen.drawn)

    def test_tick_timer_follows_phase(self):
        self.assertFalse(self.terminal.ticking)
        self._press(" ")
        self.assertIs(self.session.timer.phase, Phase.INSPECTING)
        self.assertTrue(self.terminal.ticking)
        self._press(" ")
        self.assertIs(self.session.timer.phase, Phase.RUNNING)
        self.assertTrue(self.terminal.ticking)
        self.clock.advance(4.0)
        self._press(" ")
        self.assertIs(self.session.timer.phase, Phase.IDLE)
        self.assertFalse(self.terminal.ticking)
        self.assertEqual(len(self.session.history), 1)

    def test_reset_cancels_ticking(self):
        self._press(" ")
        self.assertTrue(self.terminal.ticking)
        self._press("r")
        self.assertFalse(self.terminal.ticking)

    def test_tick_refreshes_display(self):
        self._press(" ")
        self._press(" ")
        self.clock.advance(1.5)
        self.terminal._tick()
        self.assertIn("1.50000", self.screen.drawn)
        self.assertTrue(self.terminal.ticking)

    def test_unmapped_keys_do_nothing(self):
        self._press("x")
        self.assertIs(self.session.timer.phase, Phase.IDLE)
        self.assertFalse(self.terminal.ticking)

    def test_quit_stops_the_loop(self):
        self._press(" ")
        with patch.object(self.terminal, "stop", wraps=self.terminal.stop) as stop:
            self._press("q")
        stop.assert_called_once_with()
        self.assertTrue(self.session.quitting)
        self.assertFalse(self.terminal.ticking)
        self.assertFalse(self.terminal._notifier.isEnabled())


if __name__ == "__main__":
    unittest.main()

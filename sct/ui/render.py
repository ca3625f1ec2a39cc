"""Terminal rendering: snapshot to text lines, lines to the curses screen.

Building the lines is kept apart from drawing them so the layout can be
checked without a terminal.
"""

import curses
from sct.core.history import Penalty
from sct.core.timer_state import Phase
from sct.util.misc import format_seconds, format_solve, penalty_suffix

MAIN_HELP = "[space] start/stop/next  [r] reset  [v] view all solves  [q] quit"
HISTORY_HELP = "All Past Solves [up/down] scroll  [q/esc] back"

# Rows reserved around the history list for the title, help line and padding.
HISTORY_CHROME_ROWS = 4


def history_page_size(height):
    return max(1, height - HISTORY_CHROME_ROWS)


# The big line at the top of the main view.
def timer_line(snapshot):
    if snapshot.phase is Phase.INSPECTING:
        return f"Inspection: {snapshot.countdown:2d}{penalty_suffix(snapshot.penalty)}"
    if snapshot.phase is Phase.IDLE and snapshot.last_solve is not None:
        # The finished solve is shown as timed, with the penalty as a note; the +2 is only added in the lists.
        if snapshot.last_solve.penalty is Penalty.DNF:
            return "DNF"
        raw = snapshot.last_solve.time if snapshot.last_elapsed is None else snapshot.last_elapsed
        return f"{format_seconds(raw)}{penalty_suffix(snapshot.last_solve.penalty)}"
    if snapshot.penalty is Penalty.DNF:
        return "DNF"
    return f"{format_seconds(snapshot.elapsed)}{penalty_suffix(snapshot.penalty)}"


def main_lines(snapshot):
    lines = [timer_line(snapshot), MAIN_HELP, ""]
    if snapshot.recent:
        lines.append("Past solves:")
        for i, record in enumerate(snapshot.recent, start=1):
            lines.append(f"{i:2d}. {format_solve(record)}")
    return lines


def history_lines(snapshot):
    lines = ["All Past Solves:"]
    for index, record in snapshot.page:
        lines.append(f"{index + 1:3d}. {format_solve(record)}")
    if len(lines) == 1:
        lines.append("No solves yet.")
    lines.append(HISTORY_HELP)
    return lines


def build_lines(snapshot):
    if snapshot.viewing_history:
        return history_lines(snapshot)
    return main_lines(snapshot)


# Draws the lines centered on the screen, the first one in the accent style. Lines that don't fit are clipped rather than raising.
def draw(screen, lines, accent=curses.A_BOLD):
    height, width = screen.getmaxyx()
    screen.erase()
    top = max(0, (height - len(lines)) // 2)
    for row, line in enumerate(lines[:max(0, height - top)]):
        text = line[:max(0, width - 1)]
        col = max(0, (width - len(text)) // 2)
        attr = accent if row == 0 else curses.A_NORMAL
        try:
            screen.addstr(top + row, col, text, attr)
        except curses.error:
            # Writing into the bottom-right cell raises even though the text is drawn.
            pass
    screen.refresh()

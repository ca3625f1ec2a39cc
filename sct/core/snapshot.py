"""Read-only view of a session, handed to the renderer once per event."""

from dataclasses import dataclass
from sct.core.history import Penalty, SolveRecord
from sct.core.timer_state import Phase


@dataclass(frozen=True)
class SessionSnapshot:
    phase: Phase
    elapsed: float
    countdown: int | None
    penalty: Penalty
    last_solve: SolveRecord | None
    recent: tuple
    last_elapsed: float | None = None
    viewing_history: bool = False
    page: tuple = ()            # (index, SolveRecord) pairs, index into the full history
    scroll_offset: int = 0
    total: int = 0
    quitting: bool = False

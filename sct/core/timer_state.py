import math
import time
from enum import Enum
from sct.common.logger import log
from sct.core.config import Settings
from sct.core.history import Penalty, SolveRecord


class Phase(str, Enum):
    IDLE = "idle"
    INSPECTING = "inspecting"
    RUNNING = "running"


# Maps an inspection duration onto a penalty. Limits are inclusive, so exactly 15s is still clean and exactly 17s
# is still a +2.
def penalty_for_inspection(duration, inspection_seconds=15.0, dnf_after_seconds=17.0):
    if duration > dnf_after_seconds:
        return Penalty.DNF
    if duration > inspection_seconds:
        return Penalty.PLUS_TWO
    return Penalty.NONE

# Builds the finalized record from the raw solve time and the penalty frozen when timing began.
def finalize_solve(elapsed, penalty, plus_two_seconds=2.0):
    if penalty is Penalty.PLUS_TWO:
        return SolveRecord(time=elapsed + plus_two_seconds, penalty=Penalty.PLUS_TWO)
    return SolveRecord(time=elapsed, penalty=penalty)

# Whole seconds left on the inspection countdown, never below zero.
def countdown_remaining(elapsed, inspection_seconds=15.0):
    return max(0, int(inspection_seconds) - math.floor(elapsed))


# The live timer for one practice session. Uses monotonic seconds through an injectable clock, so tests can drive
# it with a fake one. Every transition is total: advance/reset/tick are valid from any phase.
class TimerState:

    def __init__(self, settings: Settings | None = None, clock=time.monotonic):
        self.settings = settings or Settings()
        self._clock = clock
        self.phase = Phase.IDLE
        self.phase_start = None
        self.elapsed = 0.0
        self.pending_penalty = Penalty.NONE
        # Most recent finalized solve and its raw time, kept only for display until the next inspection or a reset.
        self.last_solve = None
        self.last_elapsed = None

    @property
    def active(self):
        return self.phase is not Phase.IDLE

    @property
    def countdown(self):
        if self.phase is not Phase.INSPECTING:
            return None
        return countdown_remaining(self.elapsed, self.settings.inspection_seconds)

    def _refresh(self):
        if self.phase_start is not None:
            self.elapsed = self._clock() - self.phase_start
        if self.phase is Phase.INSPECTING:
            self.pending_penalty = penalty_for_inspection(
                self.elapsed,
                self.settings.inspection_seconds,
                self.settings.dnf_after_seconds,
            )

    # Refreshes derived fields. Returns whether another tick is wanted.
    def tick(self):
        if not self.active:
            return False
        self._refresh()
        return True

    # Steps the phase forward. Returns the finalized SolveRecord when a running solve is stopped, otherwise None.
    def advance(self):
        if self.phase is Phase.IDLE:
            self.phase = Phase.INSPECTING
            self.phase_start = self._clock()
            self.elapsed = 0.0
            self.pending_penalty = Penalty.NONE
            self.last_solve = None
            self.last_elapsed = None
            log.debug(f"Started inspection at mono {self.phase_start}")
            return None

        if self.phase is Phase.INSPECTING:
            self._refresh()
            inspected = self.elapsed
            self.phase = Phase.RUNNING
            self.phase_start = self._clock()
            self.elapsed = 0.0
            log.debug(f"Started solve at mono {self.phase_start} after {inspected:.3f}s inspection, frozen penalty '{self.pending_penalty.value}'")
            return None

        self._refresh()
        solve_time = self.elapsed
        record = finalize_solve(solve_time, self.pending_penalty, self.settings.plus_two_seconds)
        log.debug(f"Stopped solve after {self.elapsed:.5f}s, recorded {record}")
        self.phase = Phase.IDLE
        self.phase_start = None
        self.elapsed = 0.0
        self.pending_penalty = Penalty.NONE
        self.last_solve = record
        self.last_elapsed = solve_time
        return record

    # Returns to idle from anywhere, dropping the in-progress attempt. History is never touched here.
    def reset(self):
        self.phase = Phase.IDLE
        self.phase_start = None
        self.elapsed = 0.0
        self.pending_penalty = Penalty.NONE
        self.last_solve = None
        self.last_elapsed = None
        log.debug("Reset timer to idle")

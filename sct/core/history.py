"""Solve history. Finalized records, most recent first, persisted as JSON.

The file layout is a plain list of ``{"time": float, "penalty": str}`` objects
in display order, using the same field names and penalty strings as the first
version of the timer, so its records can be dropped into ``solves.json`` as is.
Reading never fails loudly: a missing or malformed file is just an empty
history. Writing is best effort and reports success as a bool.
"""

import json
import math
import os
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from sct.common.logger import log
from sct.common.setup import PATHS

HISTORY_PATH = PATHS.history


class Penalty(str, Enum):
    """Penalty annotation; the value is what gets written to disk."""
    NONE = ""
    PLUS_TWO = "+2"
    DNF = "DNF"


@dataclass(frozen=True)
class SolveRecord:
    time: float
    penalty: Penalty = Penalty.NONE


class MalformedHistoryError(ValueError):
    pass


#region === Encoding ===

def record_to_dict(record):
    return {"time": record.time, "penalty": record.penalty.value}

# Raises MalformedHistoryError on anything that isn't a well-formed entry. Booleans are rejected even though
# they're technically ints.
def record_from_dict(raw):
    if not isinstance(raw, dict):
        raise MalformedHistoryError(f"Expected an object, got {type(raw).__name__}")
    time_value = raw.get("time")
    if isinstance(time_value, bool) or not isinstance(time_value, (int, float)) or not math.isfinite(time_value):
        raise MalformedHistoryError(f"Invalid solve time {time_value!r}")
    penalty_value = raw.get("penalty", Penalty.NONE.value)
    if penalty_value is None:
        penalty_value = Penalty.NONE.value
    try:
        penalty = Penalty(penalty_value)
    except ValueError:
        raise MalformedHistoryError(f"Unknown penalty {penalty_value!r}") from None
    return SolveRecord(time=float(time_value), penalty=penalty)

def decode_history(data):
    if not isinstance(data, list):
        raise MalformedHistoryError(f"Expected a list of solves, got {type(data).__name__}")
    return [record_from_dict(entry) for entry in data]

#endregion === Encoding ===


class HistoryStore:
    """Ordered solve records plus their backing file.

    ``records`` is only ever changed through ``append`` and ``load``.
    """

    def __init__(self, path: Path | None = None):
        self.path = Path(path) if path is not None else HISTORY_PATH
        self.records: list[SolveRecord] = []

    def __len__(self):
        return len(self.records)

    @property
    def corrupt_path(self):
        return self.path.with_name(self.path.name + ".corrupt")

    #region === Persistence ===

    # Replaces the in-memory records with whatever is on disk. Never raises; anything unusable means "no history".
    def load(self):
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            self.records = decode_history(data)
        except FileNotFoundError:
            log.info(f"No existing history found at '{self.path}', starting with an empty history.")
            self.records = []
        except (OSError, UnicodeDecodeError):
            log.warning(f"Could not read history from '{self.path}', starting with an empty history.",exc_info=True)
            self.records = []
        except (json.JSONDecodeError, MalformedHistoryError):
            log.warning(f"History file '{self.path}' is malformed, starting with an empty history.",exc_info=True)
            self._preserve_corrupt_file()
            self.records = []
        else:
            log.info(f"Successfully loaded {len(self.records)} solves from '{self.path}'.")
        return list(self.records)

    # Keeps a copy of an unparseable history file before it gets overwritten by the next save.
    def _preserve_corrupt_file(self):
        try:
            shutil.copyfile(self.path, self.corrupt_path)
            log.warning(f"Copied malformed history to '{self.corrupt_path}'")
        except OSError:
            log.warning(f"Failed to copy malformed history to '{self.corrupt_path}'",exc_info=True)

    # Writes the full sequence (the store's own by default) over the previous file. The data goes to a temp sibling
    # first and is renamed into place, so a failed write never leaves a half-written history behind.
    def save(self, records=None):
        records = self.records if records is None else list(records)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump([record_to_dict(r) for r in records], f, indent=2)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError):
            log.error(f"Failed to save {len(records)} solves to '{self.path}'",exc_info=True)
            try: tmp_path.unlink()
            except OSError: pass
            return False
        log.info(f"Successfully saved {len(records)} solves to '{self.path}'")
        return True

    #endregion === Persistence ===

    #region === Mutation and Views ===

    def append(self, record):
        self.records.insert(0, record)
        log.debug(f"Appended solve {record} at position 0, history length now {len(self.records)}")

    def recent_view(self, n):
        return list(self.records[:max(0, n)])

    # Offsets are clamped to [0, len-1], or 0 for an empty history.
    def clamp_offset(self, offset):
        if not self.records:
            return 0
        return min(max(0, offset), len(self.records) - 1)

    def paged_view(self, offset, count):
        start = self.clamp_offset(offset)
        return list(self.records[start:start + max(0, count)])

    #endregion === Mutation and Views ===

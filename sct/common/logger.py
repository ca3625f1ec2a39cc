import logging
from pathlib import Path
from logging.handlers import RotatingFileHandler
from sct.common.setup import PATHS
from datetime import datetime

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(filename)s:%(lineno)d] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Sizes for the long-lived rotating log
_ROTATE_BYTES = 1024 * 1024
_ROTATE_COUNT = 3

# Opens the three file sinks for one run: a rotating INFO log kept across runs, latest.log overwritten every run,
# and a DEBUG log per run under debug/ of which only the newest `keep_runs` survive.
def _file_handlers(name, log_dir: Path, keep_runs):
    log_dir.mkdir(parents=True,exist_ok=True)
    debug_dir = log_dir / "debug"
    debug_dir.mkdir(exist_ok=True)

    rotating = RotatingFileHandler(log_dir / f"{name}.log", maxBytes=_ROTATE_BYTES, backupCount=_ROTATE_COUNT, encoding="utf-8")
    rotating.setLevel(logging.INFO)
    latest = logging.FileHandler(log_dir / "latest.log", mode="w", encoding="utf-8")
    latest.setLevel(logging.INFO)
    this_run = logging.FileHandler(debug_dir / f"{name}_{datetime.now():%Y-%m-%d_%H-%M-%S}.log", encoding="utf-8")
    this_run.setLevel(logging.DEBUG)

    runs = sorted(debug_dir.glob(f"{name}_*.log"),key=lambda p: p.stat().st_mtime,reverse=True)
    for run in runs[keep_runs:]:
        try: run.unlink()
        except OSError: pass
    return [rotating, latest, this_run]

# Builds the program logger once. The terminal is owned by curses, so there is no console output; if the log folder
# can't be written, logging goes to a NullHandler and the timer carries on without it.
def get_logger(name="solvetimer", log_dir: Path | None = None, keep_runs=10) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.propagate = False
    logger.setLevel(logging.DEBUG)

    try:
        handlers = _file_handlers(name, log_dir or PATHS.logs, keep_runs)
    except OSError:
        handlers = [logging.NullHandler()]
    fmt = logging.Formatter(LOG_FORMAT,LOG_DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(fmt)
        logger.addHandler(handler)
    return logger

log = get_logger()
log.info("=== INITIALIZED NEW SESSION ===")

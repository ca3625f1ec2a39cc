import json
from dataclasses import dataclass, fields
from sct.common.logger import log
from sct.common.setup import PATHS

#region === Defaults and Paths ===

SETTINGS_PATH = PATHS.settings

# Default values for every tunable. Anything missing or of the wrong type in settings.json falls back to these.
_SETTINGS_DEFAULTS = {
    "inspection_seconds": 15.0,
    "dnf_after_seconds": 17.0,
    "plus_two_seconds": 2.0,
    "tick_interval_ms": 30,
    "recent_count": 5,
}

# Read-only bundle of the timing constants, handed to the state machine and session at construction.
@dataclass(frozen=True)
class Settings:
    inspection_seconds: float = _SETTINGS_DEFAULTS["inspection_seconds"]
    dnf_after_seconds: float = _SETTINGS_DEFAULTS["dnf_after_seconds"]
    plus_two_seconds: float = _SETTINGS_DEFAULTS["plus_two_seconds"]
    tick_interval_ms: int = _SETTINGS_DEFAULTS["tick_interval_ms"]
    recent_count: int = _SETTINGS_DEFAULTS["recent_count"]

    def as_dict(self):
        return {f.name: getattr(self, f.name) for f in fields(self)}

#endregion === Defaults and Paths ===

#region === Loading Settings ===

# Checks one raw value against the type of its default. Ints are accepted for float settings, bools never count
# as numbers here.
def _valid_value(key, value):
    default = _SETTINGS_DEFAULTS[key]
    if isinstance(value, bool):
        return False
    if isinstance(default, float):
        return isinstance(value, (int, float)) and value >= 0
    return isinstance(value, int) and value > 0

# Loads settings from PATHS.settings / settings.json. The file is optional, and every problem with it results in
# defaults rather than an error.
def load_settings():
    try:
        with open(SETTINGS_PATH, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError:
        log.info(f"No settings.json found, using default timer settings {Settings().as_dict()}")
        return Settings()
    except (json.JSONDecodeError, OSError, UnicodeDecodeError):
        log.warning(f"Could not read '{SETTINGS_PATH}', falling back to default timer settings.",exc_info=True)
        return Settings()
    if not isinstance(raw, dict):
        log.warning(f"Expected an object in '{SETTINGS_PATH}', got {type(raw).__name__}. Using defaults.")
        return Settings()

    values = {}
    defaulted_values = set()
    for key, default in _SETTINGS_DEFAULTS.items():
        value = raw.get(key, default)
        if not _valid_value(key, value):
            defaulted_values.add(key)
            value = default
        values[key] = value

    # Limits have to be ordered or the +2 window makes no sense.
    if values["dnf_after_seconds"] < values["inspection_seconds"]:
        defaulted_values.update({"inspection_seconds", "dnf_after_seconds"})
        values["inspection_seconds"] = _SETTINGS_DEFAULTS["inspection_seconds"]
        values["dnf_after_seconds"] = _SETTINGS_DEFAULTS["dnf_after_seconds"]

    if defaulted_values:
        log.warning(f"Loaded settings from '{SETTINGS_PATH}', but with invalid values that were defaulted: {', '.join(sorted(defaulted_values))}")
    else:
        log.info(f"Successfully loaded settings from '{SETTINGS_PATH}'.")
    settings = Settings(**values)
    log.info(f"Timer settings in effect: {settings.as_dict()}")
    return settings

#endregion === Loading Settings ===

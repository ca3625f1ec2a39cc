from pathlib import Path
from dataclasses import dataclass

DATA_DIR_NAME = ".solvetimer"

# Resolves the per-user base folder. If the home directory can't be determined we fall back to the
# current working directory rather than refusing to start.
def _user_base():
    try:
        return Path.home()
    except RuntimeError:
        return Path.cwd()

# Dataclass for accessing paths across program. Nothing here touches the disk; folders are created lazily by
# whoever writes into them, inside their own error handling.
@dataclass(frozen=True)
class ProjectPaths:

    data: Path
    logs: Path

    history: Path
    settings: Path

    @staticmethod
    def build(base: Path | None = None):
        data = (base or _user_base()) / DATA_DIR_NAME
        return ProjectPaths(
            data = data,
            logs = data / "logs",
            history = data / "solves.json",
            settings = data / "settings.json",
        )
PATHS = ProjectPaths.build()

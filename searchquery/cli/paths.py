from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from platformdirs import PlatformDirs

APP_NAME = "searchquery"


@dataclass(frozen=True, slots=True)
class CliPaths:
    log_dir: Path
    log_file: Path


def get_paths() -> CliPaths:
    dirs = PlatformDirs(APP_NAME, appauthor=False)
    log_dir = Path(dirs.user_log_dir)
    return CliPaths(log_dir=log_dir, log_file=log_dir / f"{APP_NAME}.log")

"""
Reading and writing the time log file and the code file.
"""

from pathlib import Path

from core.config import (
    CODE_COMMENT_PREFIXES,
    EXIT_CODE_FILE,
    EXIT_LOG_FILE,
    ConfigError,
)
from core.timelog import TimeLog, TimeLogError, parse_timelog


def parse_codes(text: str) -> list[str]:
    """One code per line; blank lines and comment lines are dropped."""
    codes = []
    for line in text.split("\n"):
        code = line.strip()
        if not code or code.startswith(CODE_COMMENT_PREFIXES):
            continue
        codes.append(code)
    return codes


def load_codes(path: Path) -> list[str]:
    """Read the list of known codes."""
    try:
        return parse_codes(Path(path).read_text())
    except OSError as e:
        raise ConfigError(f"Error reading code file: {e}", EXIT_CODE_FILE) from e


def save_codes(path: Path, codes: list[str]):
    try:
        Path(path).write_text("\n".join(codes) + "\n")
    except OSError as e:
        raise ConfigError(f"Could not write modified code file: {e}", EXIT_CODE_FILE) from e


def load_timelog(path: Path) -> TimeLog:
    """
    Read and parse the time log, creating an empty one if needed.

    The returned log is sorted.
    """
    path = Path(path)
    try:
        path.touch(exist_ok=True)
        content = path.read_text()
    except OSError as e:
        raise ConfigError(f"Error reading time log: {e}", EXIT_LOG_FILE) from e

    try:
        log = parse_timelog(content)
    except TimeLogError as e:
        raise ConfigError(str(e), EXIT_LOG_FILE) from e

    log.sort()
    return log


def save_timelog(path: Path, log: TimeLog):
    """Replace the whole time log file with `log`."""
    with open(path, "w") as f:
        log.format(f)

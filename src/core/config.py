"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path
from string import Template

from dotenv import dotenv_values, load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = Path(os.environ.get("TIMECLOCK_DB_PATH", PROJECT_ROOT / "data" / "db" / "timeclock.db"))
OUTPUT_DIR = PROJECT_ROOT / "output"

CONFIG_DIR_NAME = "sctime"
CONFIG_FILE_NAME = "config.ini"

# =============================================================================
# TOOL CONFIGURATION (config.ini defaults)
# =============================================================================

DEFAULT_CONFIG = {
    "logfile": "$HOME/sctime.log",
    "codefile": "$CONFIG/codes.txt",
    "reportsdir": "$CONFIG/reports",
}

# Code file lines starting with any of these are skipped.
CODE_COMMENT_PREFIXES = ("#", "//", ";")

# Clock-in times are rounded to this many minutes.
ROUND_MINUTES = 6

# Special report codes: periods with a blank code, and periods with any code.
EMPTY_CODE = "empty"
ALL_CODES = "all"
SUBTREE_SUFFIX = ":..."

# =============================================================================
# REPORT CONFIGURATION
# =============================================================================

WEEKDAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
SUMMARY_HEADERS = ["Code"] + WEEKDAY_NAMES + ["Total"]
DETAIL_HEADERS = ["Begin", "End", "Hours", "Code", "Description"]
DEFAULT_REPORT = "default"

# =============================================================================
# API CONFIGURATION
# =============================================================================

TIMECLOCK_API_KEY = os.environ.get("TIMECLOCK_API_KEY", "")
API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
MAX_UPLOAD_SIZE_MB = int(os.environ.get("MAX_UPLOAD_SIZE_MB", "10"))
MAX_UPLOAD_SIZE_BYTES = MAX_UPLOAD_SIZE_MB * 1024 * 1024
API_VERSION = "1.0.0"

# =============================================================================
# EXIT CODES
# =============================================================================

EXIT_ERROR = 1
EXIT_ENVIRONMENT = 5
EXIT_CONFIG = 6
EXIT_CODE_FILE = 7
EXIT_LOG_FILE = 8
EXIT_REPORTS = 9


class ConfigError(Exception):
    """Configuration problem that should stop the tool with `exit_code`."""

    def __init__(self, message: str, exit_code: int = EXIT_CONFIG):
        super().__init__(message)
        self.exit_code = exit_code


def get_config_dir(environ: dict | None = None) -> Path:
    """
    Locate the configuration directory.

    TIMECLOCK_CONFIG_DIR wins, then $XDG_CONFIG_HOME/sctime, then
    $HOME/.config/sctime.
    """
    env = os.environ if environ is None else environ

    if env.get("TIMECLOCK_CONFIG_DIR"):
        return Path(env["TIMECLOCK_CONFIG_DIR"])

    base = env.get("XDG_CONFIG_HOME")
    if not base:
        home = env.get("HOME")
        if not home:
            raise ConfigError(
                "Both XDG_CONFIG_HOME and HOME do not exist or are invalid.",
                EXIT_ENVIRONMENT,
            )
        base = str(Path(home) / ".config")

    return Path(base) / CONFIG_DIR_NAME


def expand_value(value: str, config_dir: Path, environ: dict | None = None) -> str:
    """Expand $VAR and ${VAR} from the environment, plus $CONFIG."""
    env = dict(os.environ if environ is None else environ)
    env["CONFIG"] = str(config_dir)
    return Template(value).safe_substitute(env)


def write_default_config(config_dir: Path):
    """Write config.ini with the default settings and create the reports directory."""
    with open(config_dir / CONFIG_FILE_NAME, "w") as f:
        for key, value in DEFAULT_CONFIG.items():
            f.write(f"{key}={value}\n")
    (config_dir / "reports").mkdir(parents=True, exist_ok=True)


def load_config(config_dir: Path | None = None, environ: dict | None = None) -> dict[str, str]:
    """
    Load config.ini over the defaults and expand variables in each value.

    A missing config file is written out with defaults, but is still an
    error: the user has to look at it before the tool runs.
    """
    if config_dir is None:
        config_dir = get_config_dir(environ)

    try:
        config_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigError(f"Error ensuring existence of config directory: {e}") from e

    config_path = config_dir / CONFIG_FILE_NAME
    if not config_path.exists():
        try:
            write_default_config(config_dir)
        except OSError as e:
            raise ConfigError(f"Error writing default config file: {e}") from e
        raise ConfigError(f"Config file does not exist, wrote defaults to {config_path}")

    config = dict(DEFAULT_CONFIG)
    # Keys are read without interpolation; expansion happens below, with $CONFIG.
    for key, value in dotenv_values(config_path, interpolate=False).items():
        if value is not None:
            config[key] = value

    return {key: expand_value(value, config_dir, environ) for key, value in config.items()}

"""Tests for configuration loading and log/code file handling."""

from pathlib import Path

import pytest

from core.config import (
    EXIT_CODE_FILE,
    EXIT_CONFIG,
    EXIT_ENVIRONMENT,
    EXIT_LOG_FILE,
    ConfigError,
    expand_value,
    get_config_dir,
    load_config,
)
from core.logfile import load_codes, load_timelog, parse_codes, save_codes, save_timelog
from core.timelog import local_time


def test_config_dir_precedence():
    assert get_config_dir({"TIMECLOCK_CONFIG_DIR": "/etc/tc", "HOME": "/h"}) == Path("/etc/tc")
    assert get_config_dir({"XDG_CONFIG_HOME": "/x", "HOME": "/h"}) == Path("/x/sctime")
    assert get_config_dir({"HOME": "/h"}) == Path("/h/.config/sctime")


def test_config_dir_needs_home():
    with pytest.raises(ConfigError) as exc:
        get_config_dir({})
    assert exc.value.exit_code == EXIT_ENVIRONMENT


def test_expand_value():
    env = {"HOME": "/home/me"}
    assert expand_value("$HOME/sctime.log", Path("/cfg"), env) == "/home/me/sctime.log"
    assert expand_value("${CONFIG}/codes.txt", Path("/cfg"), env) == "/cfg/codes.txt"
    assert expand_value("$UNSET/x", Path("/cfg"), env) == "$UNSET/x"


def test_missing_config_writes_defaults(tmp_path):
    with pytest.raises(ConfigError) as exc:
        load_config(tmp_path, {"HOME": "/home/me"})
    assert exc.value.exit_code == EXIT_CONFIG

    written = (tmp_path / "config.ini").read_text()
    assert "logfile=$HOME/sctime.log" in written
    assert (tmp_path / "reports").is_dir()

    config = load_config(tmp_path, {"HOME": "/home/me"})
    assert config == {
        "logfile": "/home/me/sctime.log",
        "codefile": f"{tmp_path}/codes.txt",
        "reportsdir": f"{tmp_path}/reports",
    }


def test_config_overrides(tmp_path):
    (tmp_path / "config.ini").write_text(
        "# my settings\n"
        'logfile="$CONFIG/work.log"\n'
        "extra = value\n"
    )
    config = load_config(tmp_path, {"HOME": "/home/me"})
    assert config["logfile"] == f"{tmp_path}/work.log"
    assert config["codefile"] == f"{tmp_path}/codes.txt"
    assert config["extra"] == "value"


def test_parse_codes():
    text = "Project\n  Project:Sub  \n\n# comment\n// comment\n; comment\nAdmin"
    assert parse_codes(text) == ["Project", "Project:Sub", "Admin"]


def test_codes_round_trip(tmp_path, codes):
    path = tmp_path / "codes.txt"
    save_codes(path, codes)
    assert load_codes(path) == codes


def test_missing_code_file(tmp_path):
    with pytest.raises(ConfigError) as exc:
        load_codes(tmp_path / "nope.txt")
    assert exc.value.exit_code == EXIT_CODE_FILE


def test_load_timelog_creates_and_sorts(tmp_path, sample_text):
    path = tmp_path / "time.log"
    assert load_timelog(path) == []
    assert path.exists()

    path.write_text("2023/07/06 05:00PM [B] b\n2023/07/06 09:00AM [A] a\n")
    log = load_timelog(path)
    assert [e.code for e in log] == ["A", "B"]

    save_timelog(path, log)
    assert path.read_text() == "2023/07/06 09:00AM [A] a\n2023/07/06 05:00PM [B] b\n"
    assert load_timelog(path)[0].at == local_time(2023, 7, 6, 9)


def test_load_timelog_parse_error(tmp_path):
    path = tmp_path / "time.log"
    path.write_text("2023/07/06 09:36AM [Unclosed\n")
    with pytest.raises(ConfigError) as exc:
        load_timelog(path)
    assert exc.value.exit_code == EXIT_LOG_FILE
    assert "line: 1" in str(exc.value)

"""
Settings for the Krill text editor.

Settings live in a plain key=value file, by default ~/krill/config/krill.conf
(override with the KRILL_CONFIG environment variable):

    # comments and blank lines are ignored
    tab_stop=8
    quit_times=3
    message_timeout=5
    safe_save=true
    log_file=~/krill/krill.log
"""
import os
from dataclasses import dataclass, fields

from krill import logger

CONFIG_PATH = os.path.expanduser("~/krill/config/krill.conf")

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


@dataclass
class Settings:
    tab_stop: int = 8
    quit_times: int = 3
    message_timeout: float = 5.0
    # False reproduces the legacy truncate-then-write save ordering
    safe_save: bool = True
    log_file: str = "~/krill/krill.log"


def _parse_bool(value: str) -> bool:
    lowered = value.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"not a boolean: {value!r}")


def _convert(kind, value: str):
    if kind is bool:
        return _parse_bool(value)
    if kind is int:
        number = int(value)
        if number < 1:
            raise ValueError(f"must be positive: {value!r}")
        return number
    if kind is float:
        number = float(value)
        if number < 0:
            raise ValueError(f"must not be negative: {value!r}")
        return number
    return value


def config_path() -> str:
    """Return the settings file path, honouring KRILL_CONFIG."""
    return os.path.expanduser(os.environ.get("KRILL_CONFIG", CONFIG_PATH))


def load_settings(path: str = None, report=None) -> Settings:
    """
    Load settings from `path` (or the default location).
    A missing file yields the defaults; bad lines are passed to `report`
    (logger.log by default) and skipped.
    """
    report = report or logger.log
    settings = Settings()
    path = path or config_path()
    if not os.path.isfile(path):
        return settings

    kinds = {f.name: f.type for f in fields(Settings)}
    try:
        with open(path, 'r', encoding='utf-8') as f:
            lines = f.read().splitlines()
    except (OSError, UnicodeDecodeError) as e:
        report(f"config: cannot read {path}: {e}")
        return settings

    for lineno, line in enumerate(lines, 1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            report(f"config: {path}:{lineno}: expected key=value")
            continue
        key, value = (part.strip() for part in line.split("=", 1))
        if key not in kinds:
            report(f"config: {path}:{lineno}: unknown setting '{key}'")
            continue
        try:
            setattr(settings, key, _convert(kinds[key], value))
        except ValueError as e:
            report(f"config: {path}:{lineno}: bad value for '{key}': {e}")
    return settings

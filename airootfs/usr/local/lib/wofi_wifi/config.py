"""wofi-wifi - Configuration loading.

Reads an optional ``key=value`` file from the first of two candidate
locations and returns an immutable :class:`Configuration` record.
"""

import logging
import os
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional

from gi.repository import GLib

log = logging.getLogger(__name__)


# --- Defaults ---
DEFAULT_FIELDS = "SSID,SECURITY"
DEFAULT_POSITION = 0
DEFAULT_XOFF = 0
DEFAULT_YOFF = 0
DEFAULT_RESCAN = "no"

# Values accepted as true for boolean keys
TRUE_VALUES = {"1", "yes", "true", "on"}

# --- Search locations ---
LOCAL_CONFIG_NAME = "config"
USER_CONFIG_SUBPATH = os.path.join("wofi", "wifi")


@dataclass(frozen=True)
class Configuration:
    """User preferences for one run."""
    fields: str = DEFAULT_FIELDS
    position: int = DEFAULT_POSITION
    xoff: int = DEFAULT_XOFF
    yoff: int = DEFAULT_YOFF
    rescan: str = DEFAULT_RESCAN
    use_saved_profiles: bool = False
    extras: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))


def config_paths() -> List[str]:
    """Return the candidate config files in search order."""
    return [
        os.path.join(os.getcwd(), LOCAL_CONFIG_NAME),
        os.path.join(GLib.get_user_config_dir(), USER_CONFIG_SUBPATH),
    ]


def _parse_int(key: str, value: str, default: int) -> int:
    try:
        return int(value, 10)
    except ValueError:
        log.warning("Invalid %s value %r, using default %d", key, value, default)
        return default


def parse_config(lines: Iterable[str]) -> Configuration:
    """Build a Configuration from ``key=value`` lines.

    Blank lines, ``#`` comments and lines without ``=`` are ignored.
    Numeric keys that fail to parse keep their built-in default.
    """
    config = Configuration()
    extras = {}

    for line in lines:
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        key = key.strip()
        value = value.strip()
        if not key or not value:
            continue

        if key == "POSITION":
            config = replace(config, position=_parse_int(key, value, DEFAULT_POSITION))
        elif key == "XOFF":
            config = replace(config, xoff=_parse_int(key, value, DEFAULT_XOFF))
        elif key == "YOFF":
            config = replace(config, yoff=_parse_int(key, value, DEFAULT_YOFF))
        elif key == "FIELDS":
            config = replace(config, fields=value)
        elif key == "RESCAN":
            config = replace(config, rescan=value.lower())
        elif key == "USE_SAVED_PROFILES":
            config = replace(config, use_saved_profiles=value.lower() in TRUE_VALUES)
        else:
            extras[key] = value
        log.debug("Set %s to %s", key, value)

    return replace(config, extras=MappingProxyType(extras))


def load_config(paths: Optional[Iterable[str]] = None) -> Configuration:
    """Load the first readable config file, or return defaults.

    Args:
        paths: Candidate files to try in order. Defaults to
            :func:`config_paths`.

    Returns:
        A Configuration record. Missing files are not an error.
    """
    if paths is None:
        paths = config_paths()

    for path in paths:
        log.debug("Trying to read config from %s", path)
        if not os.path.isfile(path):
            continue
        try:
            with open(path, "r", encoding="utf-8") as f:
                config = parse_config(f)
        except (OSError, UnicodeDecodeError) as e:
            log.warning("Could not read config %s: %s", path, e)
            continue
        log.debug("Loaded config from %s: %s", path, config)
        return config

    log.debug("No config file found, using defaults")
    return Configuration()

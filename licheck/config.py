from typing import Any, Dict, Optional, Tuple
from dataclasses import dataclass
from pathlib import Path
import datetime
import json

from licheck.messages import warning

TIMEFRAME_TOKEN = "{TIMEFRAME}"
MIN_FIRST_YEAR = 1900

################################################################################
# Errors
################################################################################

class InvalidConfiguration(ValueError):
    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason

################################################################################
# Configuration
################################################################################

@dataclass(frozen=True)
class Configuration:
    extensions: Tuple[str, ...]
    header_text: str
    root_dir: str
    exclusions: Tuple[str, ...] = ()
    first_year: Optional[int] = None
    quiet: bool = False
    keep_going: bool = False

    def __post_init__(self):
        # A bare string would be split into single characters
        for name in ('extensions', 'exclusions'):
            if isinstance(getattr(self, name), str):
                raise InvalidConfiguration(f"{name} must be a list of strings")
        # Lists are accepted for convenience, stored as tuples
        object.__setattr__(self, 'extensions', tuple(self.extensions))
        object.__setattr__(self, 'exclusions', tuple(self.exclusions))


def validate_config(config: Configuration, current_year: int) -> None:
    """
    Rejects unusable configurations before any file is touched.

    The checks always run in the same order so the reported reason is stable.
    """
    if config.first_year is not None:
        if not (MIN_FIRST_YEAR < config.first_year <= current_year):
            raise InvalidConfiguration("Invalid first year")
    if len(config.extensions) == 0:
        raise InvalidConfiguration("No extensions provided")
    if len(config.root_dir) == 0:
        raise InvalidConfiguration("No root directory provided")
    if len(config.header_text) == 0:
        raise InvalidConfiguration("No header text provided")
    if config.header_text.count(TIMEFRAME_TOKEN) != 1:
        raise InvalidConfiguration(f"Header text must contain {TIMEFRAME_TOKEN} exactly once")
    prefix, suffix = config.header_text.split(TIMEFRAME_TOKEN)
    # An empty fragment matches at offset 0, which breaks stale header replacement
    if not prefix or not suffix:
        raise InvalidConfiguration(f"Header text must have text before and after {TIMEFRAME_TOKEN}")

################################################################################
# Header template
################################################################################

@dataclass(frozen=True)
class HeaderTemplate:
    prefix: str
    suffix: str
    timeframe: str

    @property
    def text(self) -> str:
        return self.prefix + self.timeframe + self.suffix

    @classmethod
    def render(cls, config: Configuration, current_year: int) -> 'HeaderTemplate':
        prefix, suffix = config.header_text.split(TIMEFRAME_TOKEN)
        return cls(prefix, suffix, render_timeframe(config.first_year, current_year))


def render_timeframe(first_year: Optional[int], current_year: int) -> str:
    if first_year is not None and first_year != current_year:
        return f"{first_year}-{current_year}"
    return str(current_year)


def current_year(today: Optional[datetime.date] = None) -> int:
    return (today or datetime.date.today()).year

################################################################################
# Loading
################################################################################

# JSON key -> (attribute, expected types, description)
_FIELDS: Dict[str, Tuple[str, Tuple[type, ...], str]] = {
    'extensions': ('extensions', (list,), 'a list of strings'),
    'exclusions': ('exclusions', (list,), 'a list of strings'),
    'firstYear':  ('first_year', (int,), 'an integer'),
    'headerText': ('header_text', (str,), 'a string'),
    'rootDir':    ('root_dir', (str,), 'a string'),
    'quiet':      ('quiet', (bool,), 'a boolean'),
    'keepGoing':  ('keep_going', (bool,), 'a boolean'),
}

# Older configurations used this name for the header template
_LEGACY_ALIASES = {'licenseText': 'headerText'}


def config_from_dict(data: Dict[str, Any]) -> Configuration:
    if not isinstance(data, dict):
        raise InvalidConfiguration("Configuration must be a JSON object")

    data = dict(data)
    for legacy, current in _LEGACY_ALIASES.items():
        if legacy in data:
            value = data.pop(legacy)
            data.setdefault(current, value)

    kwargs: Dict[str, Any] = {}
    for key, value in data.items():
        if key not in _FIELDS:
            warning(f"Ignoring unknown configuration key: {key}")
            continue
        attr, types, description = _FIELDS[key]
        if value is None and key == 'firstYear':
            continue
        # bool is a subclass of int, a year of `true` is still an error
        if not isinstance(value, types) or (types == (int,) and isinstance(value, bool)):
            raise InvalidConfiguration(f"{key} must be {description}")
        if types == (list,):
            if not all(isinstance(item, str) for item in value):
                raise InvalidConfiguration(f"{key} must be {description}")
        kwargs[attr] = value

    for key in ('extensions', 'headerText', 'rootDir'):
        if _FIELDS[key][0] not in kwargs:
            raise InvalidConfiguration(f"Missing required configuration key: {key}")

    return Configuration(**kwargs)


def load_config(path: Path) -> Configuration:
    assert isinstance(path, Path), f"Expected Path, got {type(path)}"
    if not path.is_file():
        raise InvalidConfiguration(f"Configuration file not found: {path}")

    try:
        with open(path, 'rt', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise InvalidConfiguration(f"Malformed configuration file {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise InvalidConfiguration(f"Configuration file {path} is not valid UTF-8: {e.reason}") from e
    except OSError as e:
        raise InvalidConfiguration(f"Could not read configuration file {path}: {e.strerror or e}") from e

    return config_from_dict(data)

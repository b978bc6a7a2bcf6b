from typing import Optional
from pathlib import Path
import datetime
import sys

from licheck.config import Configuration, InvalidConfiguration, load_config
from licheck.headers import scan
from licheck.io import FileSystem, HeaderIOError
from licheck.messages import error
from licheck.report import report_check


def check_copyright_headers(config: Configuration, fs: Optional[FileSystem] = None, today: Optional[datetime.date] = None) -> bool:
    """
    Checks that every matched file carries the current header.

    Returns True when no file is missing a header or has an out-of-date one.
    """
    report = scan(config, fs=fs, today=today)
    if not config.quiet:
        report_check(report)
    return report.ok


def check_main(config_path: str, strict: bool = False) -> int:
    try:
        config = load_config(Path(config_path))
        ok = check_copyright_headers(config)
    except InvalidConfiguration as e:
        error(f"Invalid configuration: {e.reason}")
        return 1
    except HeaderIOError as e:
        error(f"Could not read {e.path}: {e.message}")
        return 1
    except OSError as e:
        error(str(e))
        return 1

    if strict and not ok:
        return 1
    return 0


if __name__ == "__main__":
    if len(sys.argv) != 2:
        error("No configuration file specified")
        print("Usage: python -m licheck.tasks.check config.json")
        sys.exit(1)

    sys.exit(check_main(sys.argv[1]))

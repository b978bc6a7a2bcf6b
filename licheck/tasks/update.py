from typing import Optional
from pathlib import Path
import datetime
import sys

from licheck.config import Configuration, InvalidConfiguration, load_config
from licheck.headers import HeaderReport, reconcile
from licheck.io import FileSystem, HeaderIOError
from licheck.messages import error
from licheck.report import report_update


def update_copyright_headers(config: Configuration, fs: Optional[FileSystem] = None, today: Optional[datetime.date] = None) -> HeaderReport:
    """
    Adds or refreshes the header in every matched file that needs it.
    """
    report = reconcile(config, fs=fs, today=today)
    if not config.quiet:
        report_update(report)
    return report


def update_main(config_path: str) -> int:
    try:
        config = load_config(Path(config_path))
        update_copyright_headers(config)
    except InvalidConfiguration as e:
        error(f"Invalid configuration: {e.reason}")
        return 1
    except HeaderIOError as e:
        # Files rewritten before the failure keep their new header
        error(f"Could not update {e.path}: {e.message}")
        return 1
    except OSError as e:
        error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    if len(sys.argv) != 2:
        error("No configuration file specified")
        print("Usage: python -m licheck.tasks.update config.json")
        sys.exit(1)

    sys.exit(update_main(sys.argv[1]))

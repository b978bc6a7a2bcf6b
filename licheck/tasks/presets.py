from typing import Callable, Dict, List
import sys

from licheck.config import Configuration, InvalidConfiguration
from licheck.io import HeaderIOError
from licheck.messages import error, info
from licheck.tasks.update import update_copyright_headers

# Named configurations for repositories that keep their header setup in code
# rather than in a JSON file.

def _typescript_mit() -> Configuration:
    return Configuration(
        extensions=[".ts"],
        exclusions=["**/headerUpdater.ts"],
        header_text="// Copyright {TIMEFRAME} Chris Knight. All rights reserved. MIT license.",
        root_dir=".",
        first_year=2023,
    )


def _python_mit() -> Configuration:
    return Configuration(
        extensions=[".py"],
        exclusions=["build/", "dist/", ".venv/", "**/__pycache__/"],
        header_text="# Copyright {TIMEFRAME} the licheck authors. MIT license.",
        root_dir=".",
    )


PRESETS: Dict[str, Callable[[], Configuration]] = {
    "typescript-mit": _typescript_mit,
    "python-mit": _python_mit,
}


def list_presets() -> None:
    for name, factory in PRESETS.items():
        config = factory()
        info(f"{name}: {', '.join(config.extensions)} -> {config.header_text}")


def run_preset(name: str) -> int:
    if name not in PRESETS:
        error(f"Unknown preset: {name}")
        return 1

    try:
        update_copyright_headers(PRESETS[name]())
    except InvalidConfiguration as e:
        error(f"Invalid configuration: {e.reason}")
        return 1
    except HeaderIOError as e:
        error(f"Could not update {e.path}: {e.message}")
        return 1
    except OSError as e:
        error(str(e))
        return 1
    return 0


def presets_main(argv: List[str]) -> int:
    if len(argv) != 1:
        error("No preset specified")
        list_presets()
        return 1
    return run_preset(argv[0])


if __name__ == "__main__":
    sys.exit(presets_main(sys.argv[1:]))

from typing import List, Optional, Tuple
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
import datetime
import enum
import logging

from licheck.config import Configuration, HeaderTemplate, validate_config, current_year
from licheck.io import FileSystem, LocalFileSystem, ExclusionSet, HeaderIOError, walk_files


class HeaderState(enum.Enum):
    CURRENT = "current"
    STALE = "stale"
    MISSING = "missing"


@dataclass
class HeaderReport:
    """
    Outcome of one walk. Paths are listed in the order they were visited.
    """
    missing: List[Path] = field(default_factory=list)
    stale: List[Path] = field(default_factory=list)
    failed: List[Tuple[Path, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.missing and not self.stale and not self.failed

    def __iter__(self):
        # Allows `missing, stale = scan(config)`
        return iter((self.missing, self.stale))


def classify(content: str, header: HeaderTemplate) -> HeaderState:
    """
    Decides which header state a file is in.

    Prefix and suffix are looked up independently of each other, so any file
    containing both fragments, in any order, counts as stale.
    """
    if header.text in content:
        return HeaderState.CURRENT
    if header.prefix in content and header.suffix in content:
        return HeaderState.STALE
    return HeaderState.MISSING


def apply_header(content: str, header: HeaderTemplate, state: HeaderState) -> str:
    if state == HeaderState.MISSING:
        return header.text + "\n" + content
    if state == HeaderState.STALE:
        # Both searches start at the beginning of the file
        start = content.index(header.prefix)
        end = content.index(header.suffix) + len(header.suffix)
        return content[:start] + header.text + content[end:]
    return content


def _in_scope(config: Configuration, root: Path, exclusions: ExclusionSet):
    def predicate(path: Path, is_dir: bool) -> bool:
        rel_path = PurePosixPath(path.relative_to(root).as_posix())
        if exclusions(rel_path, walked_path=path, is_dir=is_dir):
            return False
        if is_dir:
            return True
        return any(path.name.endswith(ext) for ext in config.extensions)
    return predicate


def _walk(config: Configuration, update: bool, fs: Optional[FileSystem], today: Optional[datetime.date]) -> HeaderReport:
    year = current_year(today)
    validate_config(config, year)

    fs = fs or LocalFileSystem()
    header = HeaderTemplate.render(config, year)
    exclusions = ExclusionSet(config.exclusions)
    root = Path(config.root_dir)
    if not fs.is_dir(root):
        raise HeaderIOError(root, "Root directory does not exist or is not a directory")

    report = HeaderReport()
    for path in walk_files(fs, root, predicate=_in_scope(config, root, exclusions)):
        try:
            content = fs.read_text(path)
            state = classify(content, header)
            if state == HeaderState.CURRENT:
                continue

            if state == HeaderState.MISSING:
                report.missing.append(path)
            else:
                report.stale.append(path)

            if update:
                logging.debug(f"Writing {state.value} header in {path}")
                fs.write_text(path, apply_header(content, header, state))
        except HeaderIOError as e:
            if not config.keep_going:
                raise
            logging.warning(f"Could not process {e.path}: {e.message}")
            report.failed.append((e.path, e.message))

    return report


def scan(config: Configuration, fs: Optional[FileSystem] = None, today: Optional[datetime.date] = None) -> HeaderReport:
    """
    Lists files missing a header and files with a stale one. Never writes.
    """
    return _walk(config, update=False, fs=fs, today=today)


def reconcile(config: Configuration, fs: Optional[FileSystem] = None, today: Optional[datetime.date] = None) -> HeaderReport:
    """
    Same walk as `scan`, but each missing or stale file is rewritten as soon as it is seen.

    Rewrites are not rolled back if a later file fails.
    """
    return _walk(config, update=True, fs=fs, today=today)

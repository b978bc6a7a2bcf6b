from typing import Callable, Generator, Iterable, List
import abc
import os
import logging
from pathlib import Path, PurePosixPath

import pathspec

##################################################################################################
# Errors
##################################################################################################

class HeaderIOError(OSError):
    """Raised when a source file cannot be read or written back."""
    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message

##################################################################################################
# Exclusions
##################################################################################################

class ExclusionSet:
    """
    Glob patterns (gitignore flavour) matched against paths relative to the walk root.

    A bare name like `file.ts` matches at any depth, `**/name` does as well, and
    patterns with an inner slash such as `some/path/*_test.ts` are anchored to the root.
    Anchored patterns are also tried against the path as walked (which starts with the
    root directory) and against the absolute path, so `src/gen.ts` still excludes
    `gen.ts` when the root is `src`.
    """
    def __init__(self, patterns: Iterable[str]):
        self.patterns = list(patterns)
        self.path_spec = pathspec.GitIgnoreSpec.from_lines(self.patterns)
        self.anchored = [p for p in self.patterns if _is_anchored(p)]
        self.anchored_spec = pathspec.GitIgnoreSpec.from_lines(self.anchored)

    def __call__(self, rel_path: PurePosixPath, walked_path: Path | None = None, is_dir: bool = False) -> bool:
        if not self.patterns:
            return False
        suffix = '/' if is_dir else ''
        if self.path_spec.match_file(rel_path.as_posix() + suffix):
            return True
        if walked_path is None or not self.anchored:
            return False
        candidates = {walked_path.as_posix(), walked_path.absolute().as_posix()}
        return any(self.anchored_spec.match_file(c + suffix) for c in candidates)

    def __bool__(self) -> bool:
        return bool(self.patterns)


def _is_anchored(pattern: str) -> bool:
    # gitignore: a slash anywhere but the end anchors the pattern
    body = pattern.strip().rstrip('/')
    return '/' in body and not body.startswith('**/') and not body.startswith('#')

##################################################################################################
# File systems
##################################################################################################

class FileSystem(abc.ABC):
    @abc.abstractmethod
    def list_dir(self, path: Path) -> List[Path]:
        """Children of a directory, in lexical order."""
        raise NotImplementedError()

    @abc.abstractmethod
    def is_dir(self, path: Path) -> bool:
        raise NotImplementedError()

    def is_symlink(self, path: Path) -> bool:
        return False

    @abc.abstractmethod
    def read_text(self, path: Path) -> str:
        raise NotImplementedError()

    @abc.abstractmethod
    def write_text(self, path: Path, content: str) -> None:
        raise NotImplementedError()


class LocalFileSystem(FileSystem):
    def list_dir(self, path: Path) -> List[Path]:
        try:
            names = os.listdir(path)
        except OSError as e:
            raise HeaderIOError(path, e.strerror or str(e)) from e
        return [path / name for name in sorted(names)]

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def is_symlink(self, path: Path) -> bool:
        return path.is_symlink()

    def read_text(self, path: Path) -> str:
        # newline='' keeps line endings untouched so rewrites are byte-for-byte
        try:
            with open(path, 'rt', encoding='utf-8', newline='') as f:
                return f.read()
        except UnicodeDecodeError as e:
            raise HeaderIOError(path, f"not valid UTF-8 text ({e.reason})") from e
        except OSError as e:
            raise HeaderIOError(path, e.strerror or str(e)) from e

    def write_text(self, path: Path, content: str) -> None:
        try:
            with open(path, 'wt', encoding='utf-8', newline='') as f:
                f.write(content)
        except OSError as e:
            raise HeaderIOError(path, e.strerror or str(e)) from e

##################################################################################################
# Walking
##################################################################################################

def walk_files(fs: FileSystem, root: Path, predicate: Callable[[Path, bool], bool] | None = None) -> Generator[Path, None, None]:
    """
    Depth-first walk yielding files below `root`, children visited in lexical order.

    `predicate(path, is_dir)` prunes entries; a rejected directory is not descended into.
    Symlinks are skipped, dangling ones included.
    """
    assert isinstance(root, Path), f"Expected Path, got {type(root)}"
    for child in fs.list_dir(root):
        if fs.is_symlink(child):
            logging.debug(f"Skipping symlink {child}")
            continue
        is_dir = fs.is_dir(child)
        if predicate is not None and not predicate(child, is_dir):
            logging.debug(f"Skipping {child}")
            continue
        if is_dir:
            yield from walk_files(fs, child, predicate=predicate)
        else:
            yield child

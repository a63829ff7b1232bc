# dirscan/core/walker.py
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional

from dirscan.config.settings import ScanPolicy
from dirscan.core.filtering import decode_name, name_matches, symlink_excluded, type_admitted
from dirscan.core.iterator import DirPair, close_handle, record_decode_error, record_io_error
from dirscan.exceptions import IteratorClosedError, ScanError
from dirscan.logging_setup import get_logger

log = get_logger(__name__)

@dataclass
class WalkFrame:
    # one open directory on the walker stack.
    path: Path
    handle: Any

    def close(self) -> None:
        close_handle(self.handle)


class Walker:
    """Iterator over ``(entry, name)`` pairs of a whole directory tree.

    Walks depth first and yields a directory before anything inside it. The
    order of siblings is whatever the file system returns. Name rules (hidden,
    backup) and the symlink rule decide both what is yielded and what is
    descended into; ``skip_files``/``skip_dirs`` only decide what is yielded.
    So a files-only walk still finds files in nested directories.

    Symlinks to directories are never descended into, even when symlinks
    are not skipped, which keeps the walk free of cycles.

    Call ``exit_current_dir()`` to stop walking the directory just entered
    (or the one just yielded, before its contents are read).
    """

    def __init__(self, policy: ScanPolicy, errors: List[ScanError], path: Path, handle):
        self.policy = policy
        self._errors = errors
        self._stack: List[WalkFrame] = [WalkFrame(path, handle)]
        self._pending: Optional[Path] = None
        self._closed = False

    def __iter__(self) -> "Walker":
        return self

    @property
    def depth(self) -> int:
        # number of directories currently open, the root included.
        return len(self._stack)

    def _check_open(self) -> None:
        if self._closed:
            raise IteratorClosedError("walker is used after its scan finished")

    def __next__(self) -> DirPair:
        self._check_open()
        while True:
            if self._pending is not None:
                self._descend(self._pending)
                self._pending = None
            if not self._stack:
                raise StopIteration

            frame = self._stack[-1]
            try:
                entry = next(frame.handle)
            except StopIteration:
                self._pop()
                continue
            except OSError as e:
                record_io_error(self._errors, e, frame.path)
                self._pop()
                continue

            name = decode_name(entry)
            if name is None:
                record_decode_error(self._errors, entry)
                continue
            if not name_matches(self.policy, name):
                continue
            try:
                if symlink_excluded(self.policy, entry):
                    continue
                descend = entry.is_dir(follow_symlinks=False)
                admitted = type_admitted(self.policy, entry)
            except OSError as e:
                record_io_error(self._errors, e, Path(entry.path))
                continue

            if descend:
                # opened on the next pull, after the directory itself is yielded.
                self._pending = Path(entry.path)
            if admitted:
                return entry, name

    def _descend(self, path: Path) -> None:
        try:
            handle = os.scandir(path)
        except OSError as e:
            record_io_error(self._errors, e, path)
            return
        log.debug("walk_descending", path=str(path), depth=len(self._stack) + 1)
        self._stack.append(WalkFrame(path, handle))

    def _pop(self) -> None:
        self._stack.pop().close()

    def exit_current_dir(self) -> "Walker":
        """Abandon the directory currently being descended into.

        If the last yielded entry is a directory that has not been entered
        yet, it is never entered. Otherwise the rest of the innermost open
        directory is dropped and the walk resumes in its parent. Exiting the
        root directory ends the walk.
        """
        self._check_open()
        if self._pending is not None:
            log.debug("walk_exit_current_dir", path=str(self._pending), entered=False)
            self._pending = None
        elif self._stack:
            log.debug("walk_exit_current_dir", path=str(self._stack[-1].path), entered=True)
            self._pop()
        return self

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        # releases every open directory handle; later use raises IteratorClosedError.
        while self._stack:
            self._pop()
        self._pending = None
        self._closed = True

    def __enter__(self) -> "Walker":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

# dirscan/core/iterator.py
import os
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from dirscan.config.settings import ScanPolicy
from dirscan.core.filtering import decode_name, entry_matches
from dirscan.exceptions import DecodeError, IoError, IteratorClosedError, ScanError
from dirscan.logging_setup import get_logger

log = get_logger(__name__)

DirPair = Tuple[os.DirEntry, str]

def record_io_error(errors: List[ScanError], error: OSError, path: Path) -> None:
    log.warning("scan_entry_io_error", path=str(path), error=str(error))
    errors.append(IoError(error, path))

def record_decode_error(errors: List[ScanError], entry: os.DirEntry) -> None:
    raw_name = os.fsencode(entry.name)
    log.warning("scan_entry_decode_failed", path=str(Path(entry.path)), raw_name=raw_name)
    errors.append(DecodeError(raw_name, Path(entry.path)))

def close_handle(handle) -> None:
    # scandir iterators hold an open directory descriptor until closed.
    close = getattr(handle, "close", None)
    if close is not None:
        close()


class DirIter:
    """Iterator over ``(entry, name)`` pairs of a single directory.

    Every yielded name is valid utf-8, so ``entry.name`` and the last
    component of ``entry.path`` are safe to encode. Parent components of
    the path may still be undecodable.

    Failures are appended to the shared ``errors`` list instead of being
    raised: an undecodable name is skipped, a failing directory stream ends
    this iterator.
    """

    def __init__(self, policy: ScanPolicy, errors: List[ScanError], path: Path, handle):
        self.policy = policy
        self.path = path
        self._errors = errors
        self._handle: Optional[Iterator[os.DirEntry]] = handle
        self._closed = False

    def __iter__(self) -> "DirIter":
        return self

    def __next__(self) -> DirPair:
        if self._closed:
            raise IteratorClosedError(f"iterator over {str(self.path)!r} is used after its scan finished")
        while self._handle is not None:
            try:
                entry = next(self._handle)
            except StopIteration:
                self._release()
                break
            except OSError as e:
                # the rest of this directory can't be trusted anymore.
                record_io_error(self._errors, e, self.path)
                self._release()
                break

            name = decode_name(entry)
            if name is None:
                record_decode_error(self._errors, entry)
                continue
            try:
                if entry_matches(self.policy, entry, name):
                    return entry, name
            except OSError as e:
                record_io_error(self._errors, e, Path(entry.path))
        raise StopIteration

    def _release(self) -> None:
        if self._handle is not None:
            close_handle(self._handle)
            self._handle = None

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        # releases the directory handle; any later pull raises IteratorClosedError.
        self._release()
        self._closed = True

    def __enter__(self) -> "DirIter":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

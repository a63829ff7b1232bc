# dirscan/core/session.py
"""
Entry points that own a scan from opening the root to reporting errors.

The iterator handed to the callback is only valid while the callback runs.
Whatever the callback leaves unread is drained afterwards, so the errors
raised at the end describe the whole directory (or tree) no matter how much
of it the callback consumed.
"""
import os
from pathlib import Path
from typing import Any, Callable, List, Union

from dirscan.config.settings import ScanPolicy
from dirscan.core.iterator import DirIter
from dirscan.core.walker import Walker
from dirscan.exceptions import IoError, ScanError, ScanErrors
from dirscan.logging_setup import get_logger

log = get_logger(__name__)

PathArg = Union[str, bytes, "os.PathLike[str]"]

def _root_path(path: PathArg) -> Path:
    # bytes roots are decoded so that every yielded entry carries a str name.
    return Path(os.fsdecode(path))

def _run(policy: ScanPolicy, path: PathArg, callback: Callable[[Any], Any], iterator_cls, mode: str) -> None:
    root = _root_path(path)
    errors: List[ScanError] = []
    log.debug("scan_started", mode=mode, root=str(root), policy=repr(policy))

    try:
        handle = os.scandir(root)
    except OSError as e:
        log.error("scan_root_open_failed", mode=mode, root=str(root), error=str(e))
        raise ScanErrors([IoError(e, root)])

    iterator = iterator_cls(policy, errors, root, handle)
    with iterator:
        callback(iterator)
        # a callback that closed the iterator itself has given up on the rest.
        if not iterator.closed:
            drained = sum(1 for _ in iterator)
            if drained:
                log.debug("scan_drained_unconsumed_entries", mode=mode, root=str(root), count=drained)

    if errors:
        log.warning("scan_failed", mode=mode, root=str(root), error_count=len(errors))
        raise ScanErrors(errors)
    log.debug("scan_completed", mode=mode, root=str(root))

def read_dir(policy: ScanPolicy, path: PathArg, callback: Callable[[DirIter], Any]) -> None:
    # scans a single directory; raises ScanErrors if anything failed.
    _run(policy, path, callback, DirIter, "read")

def walk_dir(policy: ScanPolicy, path: PathArg, callback: Callable[[Walker], Any]) -> None:
    # scans a directory tree depth first; raises ScanErrors if anything failed.
    _run(policy, path, callback, Walker, "walk")

"""
Iterate over files or subdirectories of a directory.

* file names are guaranteed to be valid utf-8, undecodable ones are reported
* hidden entries and editor/vcs backup files can be skipped by policy
* select only files, only directories, or both
* errors are collected during the scan and raised once at the end

Reading all non-hidden subdirectories::

    from dirscan import ScanPolicy

    def show(entries):
        for entry, name in entries:
            print(name, entry.path)

    ScanPolicy.dirs().read(".", show)
"""
import logging

from dirscan.config.settings import Preset, ScanPolicy
from dirscan.core.iterator import DirIter
from dirscan.core.session import read_dir, walk_dir
from dirscan.core.walker import Walker
from dirscan.exceptions import (
    ConfigError,
    DecodeError,
    DirScanError,
    IoError,
    IteratorClosedError,
    ScanError,
    ScanErrors,
)

# silent unless the host application attaches a handler.
logging.getLogger("dirscan").addHandler(logging.NullHandler())

__all__ = [
    "ConfigError",
    "DecodeError",
    "DirIter",
    "DirScanError",
    "IoError",
    "IteratorClosedError",
    "Preset",
    "ScanError",
    "ScanErrors",
    "ScanPolicy",
    "Walker",
    "read_dir",
    "walk_dir",
]

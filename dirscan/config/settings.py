from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Optional

from dirscan.logging_setup import get_logger

log = get_logger(__name__)

class Preset(Enum):
    # named starting points for a scan policy.
    ALL = "all"
    FILES = "files"
    DIRS = "dirs"

    @classmethod
    def from_string(cls, s: Optional[str]) -> "Preset":
        if not s:
            return cls.ALL
        try:
            return cls(s.lower())
        except ValueError:
            log.warning("invalid_preset_string", input_string=s)
            raise

@dataclass(frozen=True)
class ScanPolicy:
    """Settings for reading and walking directories.

    A policy is an immutable value. The ``skip_*`` methods return an updated
    copy, so they can be chained::

        ScanPolicy.files().skip_hidden(False).skip_symlinks()

    Rules applied to every entry:

    * hidden entries are the ones whose name starts with a dot ``.``
      (on all platforms);
    * backup entries are ``*~``, ``*.bak``/``*.BAK``, ``.#*`` (emacs lock
      files) and ``#*#`` (emacs auto save);
    * a symlink is dropped without resolving it when symlinks are skipped,
      otherwise it is classified by its target;
    * anything that is not a directory counts as a file.
    """

    admit_files: bool = True
    admit_dirs: bool = True
    exclude_hidden: bool = False
    exclude_symlinks: bool = False
    exclude_backup: bool = False

    @classmethod
    def all(cls) -> "ScanPolicy":
        # every entry, nothing skipped. a starting point for full control.
        return cls()

    @classmethod
    def files(cls) -> "ScanPolicy":
        # only non-directories; hidden and backup entries are ignored.
        return cls(admit_dirs=False, exclude_hidden=True, exclude_backup=True)

    @classmethod
    def dirs(cls) -> "ScanPolicy":
        # only directories; hidden and backup names are ignored.
        return cls(admit_files=False, exclude_hidden=True, exclude_backup=True)

    @classmethod
    def from_preset(cls, preset: Preset) -> "ScanPolicy":
        return {Preset.ALL: cls.all, Preset.FILES: cls.files, Preset.DIRS: cls.dirs}[preset]()

    def skip_hidden(self, flag: bool = True) -> "ScanPolicy":
        return replace(self, exclude_hidden=flag)

    def skip_dirs(self, flag: bool = True) -> "ScanPolicy":
        return replace(self, admit_dirs=not flag)

    def skip_files(self, flag: bool = True) -> "ScanPolicy":
        return replace(self, admit_files=not flag)

    def skip_symlinks(self, flag: bool = True) -> "ScanPolicy":
        return replace(self, exclude_symlinks=flag)

    def skip_backup(self, flag: bool = True) -> "ScanPolicy":
        """Skip backup files left by editors and version control systems.

        The patterns are not configurable. Turn this off and filter the
        names yourself if precise control is required.
        """
        return replace(self, exclude_backup=flag)

    def read(self, path, callback: Callable[[Any], Any]) -> None:
        """Call ``callback`` with an iterator over one directory's ``(entry, name)`` pairs.

        Raises ``ScanErrors`` when anything could not be read or decoded,
        after the callback has finished. Example::

            def show(entries):
                for entry, name in entries:
                    print(name, entry.path)

            ScanPolicy.files().read(".", show)
        """
        from dirscan.core.session import read_dir
        read_dir(self, path, callback)

    def walk(self, path, callback: Callable[[Any], Any]) -> None:
        """Like ``read`` but the iterator descends into subdirectories, depth first."""
        from dirscan.core.session import walk_dir
        walk_dir(self, path, callback)

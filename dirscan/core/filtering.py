# dirscan/core/filtering.py
import os
from typing import Optional

from dirscan.config.settings import ScanPolicy

BACKUP_SUFFIXES = ("~", ".bak", ".BAK")

def is_hidden(name: str) -> bool:
    # dot-files on every platform. "." and ".." never come out of scandir.
    return name.startswith(".") and name not in (".", "..")

def is_backup(name: str) -> bool:
    # editor and vcs leftovers: emacs locks, auto saves, tilde and .bak copies.
    if name.startswith(".#"):
        return True
    if name.endswith(BACKUP_SUFFIXES):
        return True
    return name.startswith("#") and name.endswith("#")

def decode_name(entry: os.DirEntry) -> Optional[str]:
    # returns the name if it is valid utf-8, None if it only exists as surrogate escapes.
    name = entry.name
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        return None
    return name

def name_matches(policy: ScanPolicy, name: str) -> bool:
    if policy.exclude_hidden and is_hidden(name):
        return False
    if policy.exclude_backup and is_backup(name):
        return False
    return True

def symlink_excluded(policy: ScanPolicy, entry: os.DirEntry) -> bool:
    # raises OSError if the entry type can't be determined.
    return policy.exclude_symlinks and entry.is_symlink()

def type_admitted(policy: ScanPolicy, entry: os.DirEntry) -> bool:
    # symlinks are classified by their target; a broken one is not a directory.
    if policy.admit_files and policy.admit_dirs:
        return True
    if entry.is_dir(follow_symlinks=True):
        return policy.admit_dirs
    return policy.admit_files

def entry_matches(policy: ScanPolicy, entry: os.DirEntry, name: str) -> bool:
    """Check every rule of the policy against one entry.

    Name rules go first so that no stat call is made for names that are
    skipped anyway. May raise ``OSError`` from the type lookup.
    """
    if not name_matches(policy, name):
        return False
    if symlink_excluded(policy, entry):
        return False
    return type_admitted(policy, entry)

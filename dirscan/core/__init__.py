# dirscan/core/__init__.py
"""
Directory scanning engine: entry filters, the single-level iterator, the
recursive walker and the session functions that drive them.
"""
from .iterator import DirIter
from .session import read_dir, walk_dir
from .walker import Walker

__all__ = ["DirIter", "Walker", "read_dir", "walk_dir"]

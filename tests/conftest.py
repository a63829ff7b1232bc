import os
import sys
from pathlib import Path
from typing import Dict, Optional, Set

import pytest

from dirscan import ScanPolicy

# undecodable names need a byte-oriented file system.
needs_bytes_names = pytest.mark.skipif(
    not sys.platform.startswith("linux"), reason="needs a file system that stores arbitrary bytes in names"
)
needs_symlinks = pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on windows")


def create_tree(base_path: Path, entries: Dict[str, Optional[str]]) -> Path:
    """
    Creates a directory structure under base_path.
    entries = {"dir/file.txt": "content", "empty_dir/": None}
    A key ending with "/" is a directory.
    """
    base_path.mkdir(parents=True, exist_ok=True)
    for rel_path, content in entries.items():
        target = base_path / rel_path
        if rel_path.endswith("/"):
            target.mkdir(parents=True, exist_ok=True)
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content if content is not None else f"content of {rel_path}")
    return base_path


def create_undecodable_file(directory: Path, raw_name: bytes = b"bad\xffname.txt") -> bytes:
    with open(os.path.join(os.fsencode(directory), raw_name), "wb") as f:
        f.write(b"data")
    return raw_name


def read_names(policy: ScanPolicy, root: Path) -> Set[str]:
    found: Set[str] = set()

    def collect(entries):
        for _, name in entries:
            found.add(name)

    policy.read(root, collect)
    return found


def walk_paths(policy: ScanPolicy, root: Path) -> Set[str]:
    found: Set[str] = set()

    def collect(walker):
        for entry, _ in walker:
            found.add(Path(entry.path).relative_to(root).as_posix())

    policy.walk(root, collect)
    return found


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """A small project with hidden entries, backup files and nested dirs."""
    return create_tree(tmp_path / "project", {
        "main.py": "print('main')",
        "README.txt": "readme",
        ".env": "SECRET=1",
        "notes.txt~": "old notes",
        ".#main.py": "lock",
        "#main.py#": "autosave",
        "data.bak": "backup",
        "DATA.BAK": "backup",
        "src/app.py": "app",
        "src/util/helpers.py": "helpers",
        "src/util/helpers.py~": "old helpers",
        "src/.cache/blob": "cached",
        ".git/config": "[core]",
        "empty/": None,
        "old.bak/inner.txt": "inside backup dir",
    })

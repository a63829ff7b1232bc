from pathlib import Path
from typing import Iterator, List, Sequence


class DirScanError(Exception):
    # base exception for all package-specific errors.
    pass


class ConfigError(DirScanError):
    # errors related to loading or validating scan configuration.
    pass


class IteratorClosedError(DirScanError):
    # an iterator was used after the scan that produced it finished.
    pass


class ScanError(DirScanError):
    """One failed entry or directory stream.

    Always carries the path of the offending entry or directory, so the
    message alone is enough to find the problem.
    """

    def __init__(self, message: str, path: Path):
        super().__init__(message)
        self.path = path


class IoError(ScanError):
    """An I/O error occurred while reading a directory or an entry's type.

    ``path`` is the directory (or entry) being read, ``error`` the original
    ``OSError``, which is also chained as ``__cause__``.
    """

    def __init__(self, error: OSError, path: Path):
        super().__init__(f"error reading {str(path)!r}: {error}", path)
        self.error = error
        self.__cause__ = error


class DecodeError(ScanError):
    """A file name can't be decoded as UTF-8.

    ``path`` points to the specific file with the bad name, ``raw_name``
    holds the name bytes as stored on disk.
    """

    def __init__(self, raw_name: bytes, path: Path):
        super().__init__(f"error decoding file name {str(path)!r}", path)
        self.raw_name = raw_name


class ScanErrors(DirScanError):
    """All errors collected during a single ``read`` or ``walk`` call.

    Raised once at the end of the scan, never in the middle of it. Callers
    which can live with undecodable names may look at ``io_errors`` only:
    an I/O error usually means part of a directory was never read.
    """

    def __init__(self, errors: Sequence[ScanError]):
        self.errors: List[ScanError] = list(errors)
        super().__init__(self._format())

    def _format(self) -> str:
        count = len(self.errors)
        header = f"{count} error{'s' if count != 1 else ''} while scanning directory"
        return "\n".join([header] + [f"  {err}" for err in self.errors])

    def __len__(self) -> int:
        return len(self.errors)

    def __iter__(self) -> Iterator[ScanError]:
        return iter(self.errors)

    def __getitem__(self, index):
        return self.errors[index]

    @property
    def io_errors(self) -> List[IoError]:
        return [err for err in self.errors if isinstance(err, IoError)]

    @property
    def decode_errors(self) -> List[DecodeError]:
        return [err for err in self.errors if isinstance(err, DecodeError)]

# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# backup-verify/src/backup_verify/content.py

"""Three-tier file content comparison: size, random samples, full hash.

Sampling is probabilistic. A handful of 32-byte windows can easily miss a
localised change; only the hash tier reads every byte.
"""

import os
import random
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import blake3

from .errors import ContentReadError
from .types import SAMPLE_WINDOW, ContentVerdict, DiffReason


READ_BUFFER_SIZE = 1024 * 1024


def read_sample(path: Path | str, offset: int, length: int) -> bytes:
    """Read exactly length bytes at offset. Raises ContentReadError."""
    try:
        with open(path, "rb") as f:
            f.seek(offset)
            data = f.read(length)
    except OSError as e:
        raise ContentReadError(path, e) from e
    if len(data) != length:
        raise ContentReadError(
            path, OSError(f"short read at offset {offset}: "
                          f"{len(data)} of {length} bytes"))
    return data


def hash_file(path: Path | str) -> str:
    """Hex BLAKE3 digest of a whole file. Raises ContentReadError."""
    hasher = blake3.blake3()
    try:
        with open(path, "rb", buffering=0) as f:
            while chunk := f.read(READ_BUFFER_SIZE):
                hasher.update(chunk)
    except OSError as e:
        raise ContentReadError(path, e) from e
    return hasher.hexdigest()


class ContentComparator:
    """Decide whether two regular files hold the same bytes."""

    def __init__(self, samples: int = 0, full_hash: bool = False,
                 rng: random.Random | None = None):
        if samples < 0:
            raise ValueError(f"samples must be >= 0, got {samples}")
        self.samples = samples
        self.full_hash = full_hash
        self._rng = rng or random.Random()
        self._executor: ThreadPoolExecutor | None = None

    def __enter__(self) -> "ContentComparator":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def _size(self, path: Path | str) -> int:
        try:
            return os.stat(path).st_size
        except OSError as e:
            raise ContentReadError(path, e) from e

    def _samples_differ(self, file_a: Path | str, file_b: Path | str,
                        size: int) -> bool:
        length = min(SAMPLE_WINDOW, size)
        max_offset = size - length
        for _ in range(self.samples):
            offset = self._rng.randint(0, max_offset)
            a = read_sample(file_a, offset, length)
            b = read_sample(file_b, offset, length)
            if a != b:
                return True
        return False

    def _hashes(self, file_a: Path | str, file_b: Path | str) -> tuple[str, str]:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=2, thread_name_prefix="vfy-hash")
        future_a = self._executor.submit(hash_file, file_a)
        future_b = self._executor.submit(hash_file, file_b)
        # join both before raising so neither worker is left running
        errors = []
        digests = []
        for future in (future_a, future_b):
            try:
                digests.append(future.result())
            except ContentReadError as e:
                errors.append(e)
        if errors:
            raise errors[0]
        return digests[0], digests[1]

    def compare(self, file_a: Path | str, file_b: Path | str) -> ContentVerdict:
        """Compare two files. Raises ContentReadError on any I/O failure."""
        size_a = self._size(file_a)
        size_b = self._size(file_b)
        if size_a != size_b:
            return ContentVerdict(reasons=(DiffReason.SIZE,))

        if self.samples > 0 and size_a > 0:
            if self._samples_differ(file_a, file_b, size_a):
                return ContentVerdict(reasons=(DiffReason.SAMPLE,))

        if not self.full_hash:
            return ContentVerdict()

        digests = self._hashes(file_a, file_b)
        if digests[0] != digests[1]:
            return ContentVerdict(reasons=(DiffReason.HASH,), digests=digests)
        return ContentVerdict(digests=digests)

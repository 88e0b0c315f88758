# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# tests/test_content.py

"""Unit tests for the size / sample / hash content comparator."""

import os
import random

import pytest

from backup_verify.content import ContentComparator, hash_file, read_sample
from backup_verify.errors import ContentReadError
from backup_verify.types import DiffReason


BLAKE3_EMPTY = "af1349b9f5f9a1a6a0404dea36dcc9499bcb25c9adc112b7cc9a93cae41f3262"


class FixedOffsets(random.Random):
    """Random source whose randint always returns the low bound."""

    def randint(self, a, b):
        return a


@pytest.fixture
def pair(tmp_path):
    def make(content_a: bytes, content_b: bytes):
        a = tmp_path / "a.bin"
        b = tmp_path / "b.bin"
        a.write_bytes(content_a)
        b.write_bytes(content_b)
        return a, b
    return make


class TestTiers:
    """Which tier fires for which difference."""

    def test_identical_files_are_same(self, pair):
        a, b = pair(b"hello world\n", b"hello world\n")
        with ContentComparator(samples=4, full_hash=True) as comparator:
            verdict = comparator.compare(a, b)
        assert verdict.same
        assert verdict.reasons == ()
        assert verdict.digests[0] == verdict.digests[1]

    def test_size_only_misses_same_length_change(self, pair):
        a, b = pair(b"aaaa", b"bbbb")
        assert ContentComparator().compare(a, b).same

    def test_size_mismatch_short_circuits(self, pair):
        a, b = pair(b"short", b"this is a longer string")
        with ContentComparator(samples=10, full_hash=True) as comparator:
            verdict = comparator.compare(a, b)
        assert verdict.reasons == (DiffReason.SIZE,)
        assert verdict.digests is None

    def test_sample_detects_change_everywhere(self, pair):
        a, b = pair(b"a" * 4096, b"b" * 4096)
        verdict = ContentComparator(samples=1).compare(a, b)
        assert verdict.reasons == (DiffReason.SAMPLE,)

    def test_sample_mismatch_is_conclusive(self, pair):
        a, b = pair(b"a" * 100, b"b" * 100)
        with ContentComparator(samples=3, full_hash=True) as comparator:
            verdict = comparator.compare(a, b)
        assert verdict.reasons == (DiffReason.SAMPLE,)

    def test_hash_catches_what_sampling_misses(self, pair):
        original = bytearray(b"\x00" * 1_000_000)
        changed = bytearray(original)
        changed[999_990] = 0xFF
        a, b = pair(bytes(original), bytes(changed))

        with ContentComparator(samples=1, full_hash=True,
                               rng=FixedOffsets()) as comparator:
            verdict = comparator.compare(a, b)
        assert verdict.reasons == (DiffReason.HASH,)
        assert verdict.digests[0] != verdict.digests[1]

    def test_window_is_clamped_to_short_files(self, pair):
        a, b = pair(b"abc", b"abd")
        verdict = ContentComparator(samples=5).compare(a, b)
        assert verdict.reasons == (DiffReason.SAMPLE,)

    def test_empty_files_skip_sampling(self, pair):
        a, b = pair(b"", b"")
        with ContentComparator(samples=5, full_hash=True) as comparator:
            verdict = comparator.compare(a, b)
        assert verdict.same
        assert verdict.digests == (BLAKE3_EMPTY, BLAKE3_EMPTY)

    def test_negative_samples_rejected(self):
        with pytest.raises(ValueError):
            ContentComparator(samples=-1)


class TestErrors:
    """I/O failures abort the comparison instead of reporting a difference."""

    def test_missing_file_raises(self, tmp_path):
        present = tmp_path / "present"
        present.write_bytes(b"x")
        with pytest.raises(ContentReadError) as info:
            ContentComparator().compare(tmp_path / "absent", present)
        assert info.value.path == tmp_path / "absent"

    def test_short_read_raises(self, tmp_path):
        path = tmp_path / "small"
        path.write_bytes(b"abc")
        with pytest.raises(ContentReadError):
            read_sample(path, 1, 32)

    @pytest.mark.permissions
    def test_unreadable_file_raises_during_hash(self, pair):
        a, b = pair(b"same", b"same")
        os.chmod(a, 0)
        try:
            with ContentComparator(full_hash=True) as comparator:
                with pytest.raises(ContentReadError) as info:
                    comparator.compare(a, b)
            assert info.value.path == a
        finally:
            os.chmod(a, 0o644)


def test_hash_file_of_empty_file(tmp_path):
    path = tmp_path / "empty"
    path.touch()
    assert hash_file(path) == BLAKE3_EMPTY

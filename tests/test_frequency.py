import io

import pytest  # noqa

from huffcode.abc import ALPHABET_SIZE
from huffcode.frequency import count_bytes, count_frequencies


def test_counts_nul_and_ff():
    F = count_bytes(b"\x00\x00\xff")
    assert len(F) == ALPHABET_SIZE
    assert F[0] == 2
    assert F[255] == 1
    assert sum(F) == 3


def test_empty():
    assert count_bytes(b"") == [0] * ALPHABET_SIZE
    assert count_frequencies(io.BytesIO(b"")) == [0] * ALPHABET_SIZE


@pytest.mark.parametrize("chunk_size", [1, 3, 64 * 1024])
def test_stream_matches_in_memory(chunk_size: int):
    data = bytes(range(256)) * 4 + b"hello\x00world" * 17
    F = count_frequencies(io.BytesIO(data), chunk_size=chunk_size)
    assert F == count_bytes(data)
    assert sum(F) == len(data)
    assert F[ord("l")] == 4 + 3 * 17


def test_read_error_propagates():
    class Broken(io.RawIOBase):
        def readable(self):
            return True

        def read(self, n=-1):
            raise OSError("disk on fire")

    with pytest.raises(OSError, match="disk on fire"):
        count_frequencies(Broken())

from typing import BinaryIO, Iterator

from huffcode.abc import CodeType


BUFFER_SIZE = 4096


class BitWriter:
    """Packs bits MSB first into bytes and writes them to a binary sink.

    The sink stays owned by the caller; ``close()`` pads the last partial
    byte with 0 bits and flushes, but does not close the sink.
    """

    def __init__(self, sink: BinaryIO) -> None:
        self._sink = sink
        self._acc = 0
        self._nbits = 0  # bits held in _acc, always < 8
        self._buf = bytearray()
        self.bits_written = 0
        self.closed = False

    @property
    def pad_bits(self) -> int:
        return (-self.bits_written) % 8

    def write_bit(self, bit: int) -> None:
        assert not self.closed, "write to a closed BitWriter"
        self._acc = (self._acc << 1) | (1 if bit else 0)
        self._nbits += 1
        self.bits_written += 1
        if self._nbits == 8:
            self._buf.append(self._acc)
            self._acc = 0
            self._nbits = 0
            if len(self._buf) >= BUFFER_SIZE:
                self._flush()

    def write_bits(self, code: CodeType) -> None:
        for ch in code:
            self.write_bit(ch == "1")

    def _flush(self) -> None:
        if self._buf:
            self._sink.write(bytes(self._buf))
            self._buf.clear()

    def close(self) -> None:
        if self.closed:
            return
        if self._nbits:
            self._buf.append(self._acc << (8 - self._nbits))
            self._acc = 0
            self._nbits = 0
        self._flush()
        self._sink.flush()
        self.closed = True

    def __enter__(self) -> "BitWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class BitReader:
    """Yields the bits of a binary source one at a time, MSB first.

    One chunk is read ahead so the final byte is known; when ``pad_bits``
    is given, only its first ``8 - pad_bits`` bits are yielded.
    """

    def __init__(self, source: BinaryIO, pad_bits: int = 0) -> None:
        if not 0 <= pad_bits <= 7:
            raise ValueError(f"pad_bits must be in [0, 7], got {pad_bits}")
        self._source = source
        self.pad_bits = pad_bits
        self.bytes_read = 0
        self._bits = self._generate()

    def _generate(self) -> Iterator[int]:
        cur = self._source.read(BUFFER_SIZE)
        while cur:
            nxt = self._source.read(BUFFER_SIZE)
            self.bytes_read += len(cur)
            last = len(cur) - 1
            for i, byte in enumerate(cur):
                stop = self.pad_bits - 1 if (not nxt and i == last) else -1
                for shift in range(7, stop, -1):
                    yield (byte >> shift) & 1
            cur = nxt

    def __iter__(self) -> Iterator[int]:
        return self

    def __next__(self) -> int:
        return next(self._bits)

    def read_bit(self) -> int:
        """Returns 0 or 1, or -1 once the source is exhausted."""
        return next(self._bits, -1)

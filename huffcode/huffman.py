import os
from typing import Any, Iterable, Iterator

import tqdm  # noqa

from huffcode.abc import Compressor, FreqTableType
from huffcode.bitio import BitReader, BitWriter
from huffcode.codetable import CodeTable
from huffcode.errors import CorruptStreamError, CorruptTableError, IoError
from huffcode.frequency import CHUNK_SIZE, count_bytes, count_frequencies
from huffcode.tree import build_tree, depth


def decode_bits(
    bits: Iterable[int], table: CodeTable, allow_padding: bool = False
) -> Iterator[int]:
    """Greedy prefix decoding: grow an accumulator bit by bit until it is a code.

    Raises CorruptStreamError as soon as the accumulator is neither a code
    nor the prefix of one. Left-over bits at the end are an error too,
    unless ``allow_padding`` is set and they are at most 7 zero bits.
    """
    acc = ""
    pos = 0
    for bit in bits:
        acc += "1" if bit else "0"
        pos += 1
        s = table.lookup(acc)
        if s is not None:
            yield s
            acc = ""
        elif not table.is_prefix(acc):
            raise CorruptStreamError(
                f"bits {acc} ending at bit {pos} match no code"
            )

    if acc:
        if allow_padding and len(acc) < 8 and "1" not in acc:
            return  # trailing pad bits
        raise CorruptStreamError(
            f"stream ends inside a code: {len(acc)} bits left ({acc})"
        )


class Huffman(Compressor):
    """Static Huffman coding over the byte alphabet.

    ``encode``/``decode`` work in memory on a '0'/'1' string, like the other
    compressors; ``encode_file``/``decode_file`` use the two-file format:
    a text code table plus a bit-packed stream. ``length_header`` only
    affects the file format: with it the stream starts with one byte holding
    the number of pad bits in its last byte; without it the stream is the
    bare payload.
    """

    def __init__(self, length_header: bool = True, verbose: bool = False) -> None:
        self.length_header = length_header
        self.verbose = verbose

    def log(self, *args: Any) -> None:
        if self.verbose:
            print(*args)

    def build_table(self, F: FreqTableType) -> CodeTable:
        root = build_tree(F)
        table = CodeTable.from_tree(root)

        A = [s for s, f in enumerate(F) if f > 0]
        self.log("Alphabet:", A)
        self.log("Total Frequency (M):", sum(F))
        self.log("PMF:", [F[s] for s in A])
        self.log("Tree depth:", depth(root))
        self.log("Codes:", dict(table))
        return table

    def report(self, length: int, nbits: int) -> None:
        self.log("Data length: ", length, "symbols")
        self.log(f"Encoded length: {nbits} bits = {nbits / 8:.2f} bytes")
        if nbits > 0:
            self.log(f"Compression rate: {length * 8 / nbits:.2f}x")

    def encode(self, data: bytes) -> dict[str, Any]:
        assert isinstance(data, (bytes, bytearray))

        F = count_bytes(data)
        table = self.build_table(F)
        codes = table.codes

        data_out = "".join(
            codes[s] for s in tqdm.tqdm(data, desc="Encoding", disable=not self.verbose)
        )
        self.report(len(data), len(data_out))

        meta = {
            "codes": codes,
            "length": len(data),
        }
        return {"data": data_out, "meta": meta}

    def decode(self, encoded: dict[str, Any]) -> bytes:
        try:
            in_data = encoded["data"]
            meta = encoded["meta"]
        except (KeyError, TypeError) as e:
            raise CorruptStreamError(f"encoded dict lacks data or meta: {e}") from e

        try:
            table = CodeTable(meta["codes"].items())
        except (AttributeError, KeyError, TypeError) as e:
            raise CorruptTableError(f"bad code map: {e!r}") from e

        if not isinstance(in_data, str):
            raise CorruptStreamError(
                f"encoded data must be a str, got {type(in_data).__name__}"
            )
        if in_data.strip("01") != "":
            raise CorruptStreamError("encoded data must only contain '0' and '1'")

        bits = (1 if b == "1" else 0 for b in in_data)
        decoded = bytes(decode_bits(
            tqdm.tqdm(bits, total=len(in_data), desc="Decoding", disable=not self.verbose),
            table,
        ))

        length = meta.get("length")
        if length is not None and length != len(decoded):
            raise CorruptStreamError(
                f"decoded {len(decoded)} symbols, expected {length}"
            )
        return decoded

    def encode_file(
        self, input_path: str, code_table_path: str, compressed_path: str
    ) -> dict[str, int]:
        try:
            size = os.path.getsize(input_path)

            # pass 1: frequencies
            with open(input_path, "rb") as src:
                F = count_frequencies(src, total=size, verbose=self.verbose)
            table = self.build_table(F)
            codes = table.codes

            with open(code_table_path, "w", encoding="ascii", newline="\n") as f:
                table.dump(f)

            nbits = table.encoded_bit_length(F)

            # pass 2: rewrite the input through the code table
            with open(input_path, "rb") as src, open(compressed_path, "wb") as sink:
                if self.length_header:
                    sink.write(bytes([(-nbits) % 8]))
                with BitWriter(sink) as writer, tqdm.tqdm(
                    total=size, desc="Encoding", unit="B", unit_scale=True,
                    disable=not self.verbose,
                ) as pbar:
                    while chunk := src.read(CHUNK_SIZE):
                        for s in chunk:
                            code = codes.get(s)
                            if code is None:
                                raise IoError(
                                    f"{input_path}: input changed between passes"
                                )
                            writer.write_bits(code)
                        pbar.update(len(chunk))
                if writer.bits_written != nbits:
                    raise IoError(f"{input_path}: input changed between passes")

            compressed_size = os.path.getsize(compressed_path)
        except OSError as e:
            raise IoError(f"I/O error: {e}") from e

        self.report(sum(F), nbits)
        return {
            "length": sum(F),
            "alphabet": len(table),
            "bits": nbits,
            "bytes": compressed_size,
            "max_code_length": table.max_code_length(),
        }

    def decode_file(
        self, compressed_path: str, code_table_path: str, output_path: str
    ) -> dict[str, int]:
        try:
            with open(code_table_path, "r", encoding="ascii") as f:
                try:
                    table = CodeTable.load(f)
                except UnicodeDecodeError as e:
                    raise CorruptTableError(
                        f"{code_table_path}: not an ASCII code table"
                    ) from e
            self.log("Codes:", dict(table))

            size = os.path.getsize(compressed_path)
            length = 0
            with open(compressed_path, "rb") as src, open(output_path, "wb") as out:
                pad = 0
                if self.length_header:
                    header = src.read(1)
                    if len(header) == 0:
                        raise CorruptStreamError(
                            f"{compressed_path}: missing length header"
                        )
                    pad = header[0]
                    if pad > 7:
                        raise CorruptStreamError(
                            f"{compressed_path}: bad pad bit count {pad}"
                        )
                    size -= 1

                reader = BitReader(src, pad_bits=pad)
                buf = bytearray()
                for s in decode_bits(
                    tqdm.tqdm(
                        reader, total=max(size * 8 - pad, 0), desc="Decoding",
                        unit="bit", unit_scale=True, disable=not self.verbose,
                    ),
                    table,
                    allow_padding=not self.length_header,
                ):
                    buf.append(s)
                    if len(buf) >= CHUNK_SIZE:
                        out.write(buf)
                        length += len(buf)
                        buf.clear()
                out.write(buf)
                length += len(buf)

                if pad and reader.bytes_read == 0:
                    raise CorruptStreamError(
                        f"{compressed_path}: header announces {pad} pad bits "
                        "but there is no payload"
                    )
        except OSError as e:
            raise IoError(f"I/O error: {e}") from e

        self.report(length, size * 8 - pad)
        return {
            "length": length,
            "alphabet": len(table),
            "bits": size * 8 - pad,
            "bytes": size + (1 if self.length_header else 0),
        }


def encode(
    input_path: str,
    code_table_path: str,
    compressed_path: str,
    length_header: bool = True,
    verbose: bool = False,
) -> dict[str, int]:
    return Huffman(length_header, verbose).encode_file(
        input_path, code_table_path, compressed_path
    )


def decode(
    compressed_path: str,
    code_table_path: str,
    output_path: str,
    length_header: bool = True,
    verbose: bool = False,
) -> dict[str, int]:
    return Huffman(length_header, verbose).decode_file(
        compressed_path, code_table_path, output_path
    )

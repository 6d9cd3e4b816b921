import sys

import fire  # noqa

from huffcode.errors import HuffmanError
from huffcode.huffman import Huffman


def _fail(e: HuffmanError) -> None:
    print(f"Error: {e}", file=sys.stderr)
    sys.exit(1)


def encode(
    in_file: str,
    table_file: str,
    out_file: str,
    length_header: bool = True,
    verbose: bool = True,
):
    """Compress IN_FILE into OUT_FILE, writing the code table to TABLE_FILE."""
    try:
        stats = Huffman(length_header, verbose).encode_file(in_file, table_file, out_file)
    except HuffmanError as e:
        _fail(e)
    else:
        print(f"Encoded '{in_file}' -> '{out_file}' ({stats['bytes']} bytes), table '{table_file}'")  # noqa


def decode(
    in_file: str,
    table_file: str,
    out_file: str,
    length_header: bool = True,
    verbose: bool = True,
):
    """Restore OUT_FILE from the compressed IN_FILE and its TABLE_FILE."""
    try:
        stats = Huffman(length_header, verbose).decode_file(in_file, table_file, out_file)
    except HuffmanError as e:
        _fail(e)
    else:
        print(f"Decoded '{in_file}' -> '{out_file}' ({stats['length']} bytes)")


def check(in_file: str, verbose: bool = True):
    """In-memory round trip of IN_FILE with compression statistics."""
    try:
        with open(in_file, "rb") as f:
            data = f.read()
    except OSError as e:
        _fail(HuffmanError(f"I/O error: {e}"))

    comp = Huffman(verbose=verbose)

    encoded = comp.encode(data)
    decoded = comp.decode(encoded)

    print("\nDecoding process:")

    if data == decoded:
        print("Data successfully encoded and decoded!")
        print("Alphabet size:", len(encoded["meta"]["codes"]))
        print("Data length: ", len(data), "symbols")
        print(f"Encoded length: {len(encoded['data'])} bits = {len(encoded['data']) / 8:.2f} bytes")  # noqa
        if len(data) > 0:
            orig_bites = len(data) * 8
            enc_bits = len(encoded["data"])
            print(f"Compression rate: {orig_bites / enc_bits:.2f}x")
    else:
        print("Error: decoded data does not match original!")
        print(f"Original data: {len(data)} {data[:20]!r}...")
        print(f"Decoded data:  {len(decoded)} {decoded[:20]!r}...")
        raise RuntimeError(
            f"Decoded data does not match original! {data!r} != {decoded!r}"
        )


def main():
    fire.Fire({"encode": encode, "decode": decode, "check": check})


if __name__ == "__main__":
    main()

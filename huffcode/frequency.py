from collections import Counter
from typing import BinaryIO

import tqdm  # noqa

from huffcode.abc import ALPHABET_SIZE, FreqTableType


CHUNK_SIZE = 64 * 1024


def count_bytes(data: bytes) -> FreqTableType:
    F: FreqTableType = [0] * ALPHABET_SIZE
    for s, n in Counter(data).items():
        F[s] += n
    return F


def count_frequencies(
    source: BinaryIO,
    chunk_size: int = CHUNK_SIZE,
    total: int | None = None,
    verbose: bool = False,
) -> FreqTableType:
    """Counts every byte of ``source`` in one pass over fixed-size chunks.

    ``total`` is the expected size in bytes, used only for the progress bar.
    """
    F: FreqTableType = [0] * ALPHABET_SIZE
    with tqdm.tqdm(
        total=total, desc="Counting", unit="B", unit_scale=True,
        disable=not verbose,
    ) as pbar:
        while chunk := source.read(chunk_size):
            for s, n in Counter(chunk).items():
                F[s] += n
            pbar.update(len(chunk))
    return F

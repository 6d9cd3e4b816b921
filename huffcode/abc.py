from abc import ABC, abstractmethod
from typing import TypeAlias


ALPHABET_SIZE = 256  # every byte value is a symbol, NUL included

# Type alias for the frequency table: index is the symbol, value its count
FreqTableType: TypeAlias = list[int]
CodeType: TypeAlias = str  # e.g. "0110"
CodeMapType: TypeAlias = dict[int, CodeType]


class Compressor(ABC):
    @abstractmethod
    def encode(self, data: bytes) -> dict:
        pass

    @abstractmethod
    def decode(self, encoded: dict) -> bytes:
        pass

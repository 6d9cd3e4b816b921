from typing import Iterable, Iterator, TextIO

from huffcode.abc import ALPHABET_SIZE, CodeMapType, CodeType, FreqTableType
from huffcode.errors import CorruptTableError
from huffcode.tree import Node


class CodeTable:
    """Immutable Symbol <-> Code mapping.

    ``codes`` keeps insertion order, which is also the line order of the
    persisted table. ``prefixes`` holds every proper prefix of every code,
    so a decoder can tell a partial code from a sequence that never matches.
    """

    def __init__(self, entries: Iterable[tuple[int, CodeType]] = ()) -> None:
        codes: CodeMapType = {}
        symbols: dict[CodeType, int] = {}
        for s, code in entries:
            if not 0 <= s < ALPHABET_SIZE:
                raise CorruptTableError(f"symbol out of range: {s}")
            # a tree over the full alphabet is at most ALPHABET_SIZE - 1 deep
            if len(code) >= ALPHABET_SIZE:
                raise CorruptTableError(
                    f"code for symbol {s} is too long: {len(code)} bits"
                )
            if code == "" or code.strip("01") != "":
                raise CorruptTableError(f"invalid code for symbol {s}: {code!r}")
            if s in codes:
                raise CorruptTableError(f"duplicate symbol: {s}")
            if code in symbols:
                raise CorruptTableError(
                    f"duplicate code {code}: symbols {symbols[code]} and {s}"
                )
            codes[s] = code
            symbols[code] = s

        prefixes = {code[:i] for code in symbols for i in range(len(code))}
        if clash := prefixes & symbols.keys():
            code = min(clash)
            raise CorruptTableError(
                f"code {code} of symbol {symbols[code]} is a prefix of another code"
            )

        self._codes = codes
        self._symbols = symbols
        self._prefixes = frozenset(prefixes)

    @classmethod
    def from_tree(cls, root: Node | None) -> "CodeTable":
        if root is None:
            return cls()
        if root.is_leaf():
            # A lone symbol would get the empty code; give it one bit instead
            assert root.symbol is not None
            return cls([(root.symbol, "0")])

        entries: list[tuple[int, CodeType]] = []

        def walk(node: Node, path: CodeType) -> None:
            if node.is_leaf():
                assert node.symbol is not None
                entries.append((node.symbol, path))
                return
            assert node.left is not None and node.right is not None
            walk(node.left, path + "0")
            walk(node.right, path + "1")

        walk(root, "")
        return cls(entries)

    @property
    def codes(self) -> CodeMapType:
        return dict(self._codes)

    @property
    def symbols(self) -> dict[CodeType, int]:
        return dict(self._symbols)

    @property
    def prefixes(self) -> frozenset[CodeType]:
        return self._prefixes

    def __len__(self) -> int:
        return len(self._codes)

    def __contains__(self, s: object) -> bool:
        return s in self._codes

    def __iter__(self) -> Iterator[tuple[int, CodeType]]:
        return iter(self._codes.items())

    def __getitem__(self, s: int) -> CodeType:
        return self._codes[s]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CodeTable):
            return NotImplemented
        return self._codes == other._codes

    def __repr__(self) -> str:
        return f"CodeTable({self._codes!r})"

    def lookup(self, bits: CodeType) -> int | None:
        return self._symbols.get(bits)

    def is_prefix(self, bits: CodeType) -> bool:
        return bits in self._prefixes

    def max_code_length(self) -> int:
        return max((len(c) for c in self._codes.values()), default=0)

    def encoded_bit_length(self, F: FreqTableType) -> int:
        return sum(F[s] * len(code) for s, code in self._codes.items())

    def dump(self, f: TextIO) -> None:
        for s, code in self._codes.items():
            f.write(f"{code}\t{s}\n")

    @classmethod
    def load(cls, f: TextIO) -> "CodeTable":
        entries: list[tuple[int, CodeType]] = []
        for lineno, line in enumerate(f, start=1):
            line = line.rstrip("\r\n")
            if line == "":
                continue
            fields = line.split("\t")
            if len(fields) != 2:
                raise CorruptTableError(
                    f"line {lineno}: expected '<code>\\t<symbol>', got {line!r}"
                )
            code, value = fields
            if not (value.isascii() and value.isdigit()):
                raise CorruptTableError(f"line {lineno}: bad symbol {value!r}")
            if code == "" or code.strip("01") != "":
                raise CorruptTableError(f"line {lineno}: bad code {code!r}")
            if len(code) >= ALPHABET_SIZE:
                raise CorruptTableError(
                    f"line {lineno}: code is too long: {len(code)} bits"
                )
            entries.append((int(value), code))
        # range, duplicate and prefix checks
        return cls(entries)

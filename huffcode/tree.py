import heapq
import itertools

from huffcode.abc import FreqTableType


class Node:
    """Huffman tree node: a leaf holds a symbol, an internal node two children."""

    def __init__(
        self,
        frequency: int,
        symbol: int | None = None,
        left: "Node | None" = None,
        right: "Node | None" = None,
    ) -> None:
        assert (symbol is None) == (left is not None and right is not None), \
            "a node is either a leaf or has exactly two children"
        self.frequency = frequency
        self.symbol = symbol
        self.left = left
        self.right = right

    def is_leaf(self) -> bool:
        return self.symbol is not None

    def __repr__(self) -> str:
        if self.is_leaf():
            return f"Node(frequency={self.frequency}, symbol={self.symbol})"
        return f"Node(frequency={self.frequency}, left={self.left!r}, right={self.right!r})"  # noqa


def build_tree(F: FreqTableType) -> Node | None:
    """Greedily merges the two lightest nodes until one root remains.

    Ties on frequency go to the node pushed first. Leaves are pushed in
    ascending symbol order before any merge, so among leaves the smaller
    symbol wins; merged nodes are pushed after everything already queued.
    The first node popped becomes the left child.

    Returns None when every count is zero, and the bare leaf when only one
    symbol is present.
    """
    order = itertools.count()
    heap: list[tuple[int, int, Node]] = [
        (f, next(order), Node(f, symbol=s)) for s, f in enumerate(F) if f > 0
    ]
    heapq.heapify(heap)  # order is unique, so Node itself is never compared

    if len(heap) == 0:
        return None

    while len(heap) > 1:
        f_left, _, left = heapq.heappop(heap)
        f_right, _, right = heapq.heappop(heap)
        merged = Node(f_left + f_right, left=left, right=right)
        heapq.heappush(heap, (merged.frequency, next(order), merged))

    return heap[0][2]


def depth(node: Node | None) -> int:
    if node is None or node.is_leaf():
        return 0
    return 1 + max(depth(node.left), depth(node.right))

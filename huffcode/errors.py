class HuffmanError(Exception):
    """Base class of every failure reported by encode/decode."""


class IoError(HuffmanError):
    """A file could not be opened, read or written."""


class CorruptTableError(HuffmanError):
    """The code table is malformed or not prefix-free."""


class CorruptStreamError(HuffmanError):
    """The compressed stream does not decode with the given table."""

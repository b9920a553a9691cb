"""
c-rez: embed resource files into a C header/source pair with a name lookup function.
"""

from .identifier import make_identifier, sanitize
from .trie import InvalidKey, SymbolTrie
from .writer import Generated, Resource, render, save, write_files

__version__ = "1.0.0"

__all__ = [
    "Generated",
    "InvalidKey",
    "Resource",
    "SymbolTrie",
    "make_identifier",
    "render",
    "sanitize",
    "save",
    "write_files",
]

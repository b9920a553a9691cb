"""
Symbol trie over resource names.

Every registered name is stored byte by byte; the child at byte value 0 marks
the end of a name and carries the resource symbol. The trie deduplicates names
and is turned into the body of the generated `c_rez_locate_<key>` function: one
nested `switch` per byte position of the queried name.
"""

import os
from typing import Dict, Iterator, List, Optional, TextIO, Tuple, Union

from .identifier import sanitize

LOCATE_PREFIX = "c_rez_locate_"
NULL = "(void *) 0"

# byte value reserved for the end-of-name marker
TERMINAL = 0

Name = Union[str, bytes]


class InvalidKey(ValueError):
    """Raised for names the trie cannot hold (empty or containing a NUL byte)."""


class TrieNode:
    __slots__ = ("children", "symbol")

    def __init__(self, symbol: Optional[str] = None):
        self.children: Dict[int, "TrieNode"] = {}
        self.symbol = symbol


def _as_bytes(name: Name) -> bytes:
    if isinstance(name, str):
        return os.fsencode(name)
    return bytes(name)


def char_literal(byte: int) -> str:
    """Spell a byte value as a C character literal."""
    if byte == ord("'") or byte == ord("\\"):
        return f"'\\{chr(byte)}'"
    if 0x20 <= byte < 0x7f:
        return f"'{chr(byte)}'"
    return f"'\\{byte:03o}'"


def lookup_name(key: str) -> str:
    return LOCATE_PREFIX + sanitize(key)


def lookup_prototype(key: str) -> str:
    """Declaration line of the lookup function for `key`."""
    return f"struct c_rez_resource const * {lookup_name(key)}(const char name[]);\n"


class SymbolTrie:
    """Byte-keyed prefix tree mapping resource names to symbols."""

    def __init__(self):
        self.root = TrieNode()
        self._count = 0

    def insert(self, name: Name, symbol: str) -> bool:
        """
        Register `name` under `symbol`.

        Args:
            name: Resource name, non-empty and free of NUL bytes
            symbol: Identifier the generated code returns for this name

        Returns:
            True if the name was added, False if it was already registered. The
            first symbol registered for a name is kept.
        """
        key = _as_bytes(name)
        if not key:
            raise InvalidKey("resource name must not be empty")
        if TERMINAL in key:
            raise InvalidKey(f"resource name contains a NUL byte: {key!r}")
        if not symbol:
            raise InvalidKey(f"no symbol given for {key!r}")

        node = self.root
        for byte in key:
            child = node.children.get(byte)
            if child is None:
                child = node.children[byte] = TrieNode()
            node = child

        if TERMINAL in node.children:
            return False
        node.children[TERMINAL] = TrieNode(symbol)
        self._count += 1
        return True

    def _walk(self, key: bytes) -> Optional[TrieNode]:
        node = self.root
        for byte in key:
            node = node.children.get(byte)
            if node is None:
                return None
        return node

    def locate(self, name: Name) -> Optional[str]:
        """Resolve `name` the way the generated lookup function does."""
        # the generated code sees a C string and stops at the first NUL
        key = _as_bytes(name).split(b"\0", 1)[0]
        node = self._walk(key)
        if node is None:
            return None
        terminal = node.children.get(TERMINAL)
        return terminal.symbol if terminal is not None else None

    def __contains__(self, name: Name) -> bool:
        node = self._walk(_as_bytes(name))
        return node is not None and TERMINAL in node.children

    def __len__(self) -> int:
        return self._count

    def items(self) -> Iterator[Tuple[bytes, str]]:
        """Yield (name, symbol) pairs in ascending byte order."""
        pending: List[Tuple[bytes, TrieNode]] = [(b"", self.root)]
        while pending:
            prefix, node = pending.pop()
            for byte in sorted(node.children, reverse=True):
                child = node.children[byte]
                if byte == TERMINAL:
                    if child.symbol:
                        pending.append((prefix, child))
                else:
                    pending.append((prefix + bytes([byte]), child))
            if node.symbol:
                yield prefix, node.symbol

    def lookup_definition(self, key: str) -> str:
        """Full C definition of the lookup function for `key`."""
        lines = [f"struct c_rez_resource const * {lookup_name(key)}(const char name[]) {{\n"]
        self._write_switch(lines)
        lines.append("}\n")
        return "".join(lines)

    def _write_switch(self, lines: List[str]) -> None:
        # explicit stack: a str is emitted as is, a (node, level) pair expands
        # into that node's switch
        pending: List[Union[str, Tuple[TrieNode, int]]] = [(self.root, 0)]
        while pending:
            item = pending.pop()
            if isinstance(item, str):
                lines.append(item)
                continue

            node, level = item
            pad = " " * (2 + level * 4)
            terminal = node.children.get(TERMINAL)
            result = f"&{terminal.symbol}" if terminal is not None and terminal.symbol else NULL
            lines.append(f"{pad}switch (name[{level}]) {{\n")
            lines.append(f"{pad}  case 0: return {result};\n")

            tail: List[Union[str, Tuple[TrieNode, int]]] = [
                f"{pad}}}\n",
                f"{pad}  default: return {NULL};\n",
            ]
            for byte in sorted(node.children, reverse=True):
                if byte == TERMINAL:
                    continue
                tail.append((node.children[byte], level + 1))
                tail.append(f"{pad}  case {char_literal(byte)}:\n")
            pending.extend(tail)

    def emit_lookup(self, key: str, h_file: Optional[TextIO] = None,
                    c_file: Optional[TextIO] = None) -> None:
        """Write the lookup prototype to `h_file` and its definition to `c_file`."""
        if h_file is not None:
            h_file.write(lookup_prototype(key))
        if c_file is not None:
            c_file.write(self.lookup_definition(key))

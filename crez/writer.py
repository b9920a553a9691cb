"""
Generate the header/source pair for a set of resource files.

Each input file becomes a byte array plus a `c_rez_resource` descriptor; the
names are collected in a SymbolTrie which provides deduplication and the
`c_rez_locate_<key>` lookup function.
"""

import io
import os
from typing import Callable, List, NamedTuple, Optional, Sequence, Set, Tuple, Union

from .identifier import make_identifier
from .trie import SymbolTrie

BYTES_PER_LINE = 15
GUARD_PREFIX = "c_rez_"

RESOURCE_STRUCT = """\
#ifndef c_rez_resource_struct
#define c_rez_resource_struct
typedef struct c_rez_resource {
  unsigned char const * const data;
  unsigned int const length;
} c_rez_resource;
#endif /* c_rez_resource_struct */
"""

EXTERN_C_OPENING = """\
#ifdef __cplusplus
extern "C" {
#endif
"""

EXTERN_C_CLOSING = """\
#ifdef __cplusplus
}
#endif
"""

PathLike = Union[str, os.PathLike]
# (file name, append a terminating NUL byte)
Input = Tuple[str, bool]


class Resource(NamedTuple):
    name: str
    identifier: str
    length: int


class Generated(NamedTuple):
    header: Optional[str]
    source: Optional[str]
    embedded: List[Resource]
    skipped: List[str]
    renamed: List[Tuple[str, str]]


def read_bytes(file_name: str) -> bytes:
    with open(file_name, 'rb') as f:
        return f.read()


def format_bytes(data: bytes) -> str:
    """Lay out `data` as the body of a C array initializer."""
    lines = []
    for start in range(0, len(data), BYTES_PER_LINE):
        chunk = data[start:start + BYTES_PER_LINE]
        lines.append("  " + ",".join(f" {byte:3d}" for byte in chunk))
    return ",\n".join(lines)


def include_guard(identifier: str) -> Tuple[str, str]:
    """Opening and closing include guard lines for `identifier`."""
    guard = GUARD_PREFIX + identifier
    return f"#ifndef {guard}\n#define {guard}\n", f"#endif /* {guard} */\n"


def resource_definition(identifier: str, data: bytes, is_text: bool) -> str:
    """Source text defining the data array and descriptor of one resource."""
    if is_text:
        data += b"\0"
    # a C array initializer cannot be empty
    body = format_bytes(data or b"\0")
    return (
        f"unsigned char const {identifier}_data[] = {{\n"
        f"{body}\n"
        f"}};\n"
        f"struct c_rez_resource const {identifier} = {{ {identifier}_data, {len(data)} }};\n"
    )


def _unique(identifier: str, used: Set[str]) -> str:
    """First of identifier, identifier_2, ... whose descriptor and data array names are both free."""
    candidate = identifier
    n = 1
    while candidate in used or f"{candidate}_data" in used:
        n += 1
        candidate = f"{identifier}_{n}"
    return candidate


def render(key: str, inputs: Sequence[Input], h_output: Optional[PathLike] = None,
           c_output: Optional[PathLike] = None, want_header: Optional[bool] = None,
           want_source: Optional[bool] = None,
           read: Callable[[str], bytes] = read_bytes) -> Generated:
    """
    Build header and source text in memory.

    Args:
        key: Resource key, used for identifiers, the include guard and the
            lookup function name
        inputs: Ordered (file name, is_text) pairs
        h_output: Header path; its name goes into the include guard
        c_output: Source path
        want_header: Render the header (defaults to whether h_output is set)
        want_source: Render the source (defaults to whether c_output is set)
        read: Callable returning the contents of a file name

    Returns:
        Generated texts (None for a stream that was not requested) together with
        the embedded, skipped and renamed resources
    """
    if want_header is None:
        want_header = h_output is not None
    if want_source is None:
        want_source = c_output is not None

    h_file = io.StringIO() if want_header else None
    c_file = io.StringIO() if want_source else None
    trie = SymbolTrie()
    used: Set[str] = set()
    embedded: List[Resource] = []
    skipped: List[str] = []
    renamed: List[Tuple[str, str]] = []

    guard_closing = ""
    if h_file is not None:
        header_name = os.fspath(h_output) if h_output is not None else "h"
        guard_opening, guard_closing = include_guard(make_identifier(header_name, key))
        h_file.write(guard_opening + "\n")
        h_file.write(EXTERN_C_OPENING + "\n")
        h_file.write(RESOURCE_STRUCT + "\n")

    if c_file is not None:
        c_file.write(EXTERN_C_OPENING + "\n")
        c_file.write(RESOURCE_STRUCT + "\n")

    for file_name, is_text in inputs:
        wanted = make_identifier(file_name, key)
        identifier = _unique(wanted, used)
        if not trie.insert(file_name, identifier):
            skipped.append(file_name)
            if c_file is not None:
                c_file.write("\n")
            continue

        used.update((identifier, f"{identifier}_data"))
        if identifier != wanted:
            renamed.append((file_name, identifier))

        data = read(file_name)
        length = len(data) + (1 if is_text else 0)

        if h_file is not None:
            h_file.write(f"extern c_rez_resource const {identifier};\n")
        if c_file is not None:
            c_file.write(resource_definition(identifier, data, is_text))
            c_file.write("\n")
        embedded.append(Resource(file_name, identifier, length))

    trie.emit_lookup(key, h_file, c_file)

    if h_file is not None:
        h_file.write("\n")
        h_file.write(EXTERN_C_CLOSING + "\n")
        h_file.write(guard_closing)

    if c_file is not None:
        c_file.write("\n")
        c_file.write(EXTERN_C_CLOSING)

    return Generated(
        h_file.getvalue() if h_file is not None else None,
        c_file.getvalue() if c_file is not None else None,
        embedded,
        skipped,
        renamed,
    )


def save(generated: Generated, h_output: Optional[PathLike] = None,
         c_output: Optional[PathLike] = None) -> None:
    """Write the rendered header and source to the requested paths."""
    for path, text in ((h_output, generated.header), (c_output, generated.source)):
        if path is None:
            continue
        # keep LF line endings on every platform
        with open(path, 'w', encoding='ascii', newline='\n') as f:
            f.write(text)


def write_files(key: str, inputs: Sequence[Input], h_output: Optional[PathLike] = None,
                c_output: Optional[PathLike] = None) -> Generated:
    """Render the resources and write the requested header and source files."""
    generated = render(key, inputs, h_output, c_output)
    save(generated, h_output, c_output)
    return generated

"""
Command line front end.

Usage: c-rez -k <key> [-h <output.h>] [-c <output.c>] [--text] <input> [[--text] <input>]...
"""

import argparse
import sys
from typing import List, Optional

from .trie import InvalidKey
from .writer import Input, render, save

TEXT_FLAG = "--text"

DESCRIPTION = "c-rez: a resource to c tool"

EPILOG = """\
Declarations and definitions are generated based on the input file names,
and c_rez_locate_<key>(name) returns the resource stored under a name.
If --text precedes an input, a '\\0' is appended to its data so it can be
used as a string resource. Duplicate inputs are embedded once.
"""


class _TextInput(argparse.Action):
    """Collect `--text <input>` in the same ordered list as the plain inputs."""

    def __call__(self, parser, namespace, values, option_string=None):
        inputs = list(getattr(namespace, self.dest, None) or [])
        inputs.append(values)
        setattr(namespace, self.dest, inputs)


def build_parser() -> argparse.ArgumentParser:
    # -h is the header output, so help is only reachable as --help
    parser = argparse.ArgumentParser(
        prog="c-rez",
        description=DESCRIPTION,
        epilog=EPILOG,
        add_help=False,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--help",
        action="help",
        help="show this help message and exit"
    )
    parser.add_argument(
        "-k",
        dest="key",
        metavar="KEY",
        required=True,
        help="key identifying this resource group, used in header guards and "
             "the lookup function name"
    )
    parser.add_argument(
        "-h",
        dest="h_output",
        metavar="FILE.h",
        help="header output file; if omitted, only the source is generated"
    )
    parser.add_argument(
        "-c",
        dest="c_output",
        metavar="FILE.c",
        help="source output file; if omitted, only the header is generated"
    )
    parser.add_argument(
        TEXT_FLAG,
        dest="text_inputs",
        action=_TextInput,
        metavar="INPUT",
        help="append a '\\0' to the data of the following input"
    )
    parser.add_argument(
        "inputs",
        nargs=argparse.REMAINDER,
        metavar="INPUT",
        help="files to embed"
    )
    return parser


def collect_inputs(parser: argparse.ArgumentParser, tokens: List[str],
                   leading_text: Optional[List[str]] = None) -> List[Input]:
    """
    Pair every input token with its --text flag.

    The flag applies to the next input only and is reset after every input,
    including duplicates that end up skipped.
    """
    inputs: List[Input] = [(name, True) for name in leading_text or []]
    wants_text = False
    for token in tokens:
        if token == TEXT_FLAG:
            wants_text = True
            continue
        if token.startswith("-"):
            parser.error(f"options must come before the input files: {token}")
        inputs.append((token, wants_text))
        wants_text = False

    if wants_text:
        parser.error(f"{TEXT_FLAG}: no input file specified.")
    return inputs


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.c_output and not args.h_output:
        parser.error("no header nor source output specified (use -h and/or -c).")

    args.inputs = collect_inputs(parser, args.inputs or [], args.text_inputs)
    if not args.inputs:
        parser.error("no input files specified.")
    return args


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        generated = render(args.key, args.inputs, args.h_output, args.c_output)
    except InvalidKey as e:
        print(f"Invalid input file name: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Cannot open input file {e.filename}: {e.strerror}", file=sys.stderr)
        return 1

    try:
        save(generated, args.h_output, args.c_output)
    except OSError as e:
        print(f"Cannot open output file {e.filename}: {e.strerror}", file=sys.stderr)
        return 1

    for name in generated.skipped:
        print(f"Skipping duplicate input {name}", file=sys.stderr)
    for name, identifier in generated.renamed:
        print(f"Renamed identifier of {name} to {identifier}", file=sys.stderr)

    outputs = ", ".join(path for path in (args.h_output, args.c_output) if path)
    count = len(generated.embedded)
    print(f"Generated {outputs} ({count} resource{'s' if count != 1 else ''})")
    return 0

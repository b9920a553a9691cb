import ast
from pathlib import Path

import pytest

SNAPSHOT_DIR = Path(__file__).parent / "snapshots"


def pytest_addoption(parser):
    parser.addoption(
        "--update-snapshots",
        action="store_true",
        default=False,
        help="Update snapshots instead of comparing"
    )


class Snapshot:
    """Compare generated text against files saved in tests/snapshots."""

    def __init__(self, update: bool):
        self.update = update

    def path(self, name: str) -> Path:
        return SNAPSHOT_DIR / name

    def save(self, name: str, text: str) -> None:
        SNAPSHOT_DIR.mkdir(exist_ok=True)
        with open(self.path(name), "w", encoding="ascii", newline="\n") as f:
            f.write(text)

    def load(self, name: str) -> str:
        return self.path(name).read_text(encoding="ascii")

    def assert_match(self, actual: str, name: str) -> None:
        if self.update:
            self.save(name, actual)
            return
        if not self.path(name).exists():
            pytest.fail(f"No snapshot found for {name}, run with --update-snapshots")
        assert actual == self.load(name)


@pytest.fixture
def snapshot(request):
    return Snapshot(request.config.getoption("--update-snapshots"))


def _result(line: str):
    target = line.split("return ", 1)[1].rstrip(";")
    return target[1:] if target.startswith("&") else None


def _parse_switch(lines, i):
    arms = {}
    default = None
    i += 1
    while True:
        line = lines[i].strip()
        if line == "}":
            return arms, default, i + 1
        if line.startswith("default:"):
            default = _result(line)
            i += 1
        elif line.startswith("case 0:"):
            arms[0] = _result(line)
            i += 1
        else:
            label = line[len("case "):-1]
            byte = ord(ast.literal_eval(label))
            sub_arms, sub_default, i = _parse_switch(lines, i + 1)
            arms[byte] = (sub_arms, sub_default)


def run_lookup(definition: str, name: bytes):
    """Evaluate a generated lookup function for one query, like a C compiler would."""
    lines = definition.splitlines()[1:-1]
    arms, default, _ = _parse_switch(lines, 0)
    for byte in name + b"\0":
        if byte not in arms:
            return default
        if byte == 0:
            return arms[0]
        arms, default = arms[byte]
    return None


@pytest.fixture
def lookup():
    return run_lookup

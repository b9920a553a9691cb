import shutil
import subprocess

import pytest

from crez.cli import main
from crez.writer import write_files

CC = shutil.which("cc") or shutil.which("gcc") or shutil.which("clang")

pytestmark = pytest.mark.skipif(CC is None, reason="no C compiler found")

DRIVER = r"""
#include <stdio.h>
#include "res.h"

int main(int argc, char * argv[]) {
  int i;
  for (i = 1; i < argc; i++) {
    struct c_rez_resource const * r = c_rez_locate_app(argv[i]);
    if (r) printf("%u %s\n", r->length, (char const *) r->data);
    else printf("-\n");
  }
  return 0;
}
"""


def build(directory):
    (directory / "main.c").write_text(DRIVER)
    subprocess.run(
        [CC, "-Wall", "-o", "lookup", "main.c", "res.c"],
        check=True,
        capture_output=True,
        text=True,
        cwd=str(directory)
    )


def run(directory, queries):
    result = subprocess.run(
        [str(directory / "lookup")] + queries,
        check=True,
        capture_output=True,
        text=True,
        timeout=10
    )
    return result.stdout.splitlines()


def test_lookup_end_to_end(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    names = ["icons/a.png", "icons/b.png", "readme.txt"]
    (tmp_path / "icons").mkdir()
    for name in names:
        (tmp_path / name).write_text(name.upper())

    argv = ["-k", "app", "-h", "res.h", "-c", "res.c"]
    for name in names:
        argv += ["--text", name]
    assert main(argv + ["--text", "icons/a.png"]) == 0
    build(tmp_path)

    queries = ["icons/a.png", "icons/b.png", "readme.txt",
               "icons/a.PNG", "icons/", "readme.txtx", "", "x"]
    assert run(tmp_path, queries) == [
        "12 ICONS/A.PNG",
        "12 ICONS/B.PNG",
        "11 README.TXT",
        "-",
        "-",
        "-",
        "-",
        "-",
    ]


def test_empty_lookup_compiles(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    write_files("app", [], "res.h", "res.c")
    build(tmp_path)

    assert run(tmp_path, ["", "a"]) == ["-", "-"]

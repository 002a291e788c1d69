"""Tests for listing and compiling source files."""

import pytest

import classloader
import loadertest


def run(source, scope=None):
    unit = classloader.compile_source(source, "<test>")
    if scope is None:
        scope = {}
    return unit(scope), scope


def test_top_level_return():
    result, _ = run("x = 2\nreturn x * 21\n")
    assert result == 42


def test_no_return_gives_none():
    result, _ = run("x = 1\n")
    assert result is None


def test_empty_source():
    result, _ = run("")
    assert result is None


def test_assignments_land_in_scope():
    source = """
import math as m
from os import path
y: int = 5
z: int

def helper():
    return y

class Thing:
    pass

for i in range(3):
    pass

if (w := 4):
    pass

try:
    raise ValueError
except ValueError as err:
    caught = True

squares = [n * n for n in range(3)]
return helper()
"""
    result, scope = run(source)
    assert result == 5
    for name in ("m", "path", "y", "helper", "Thing", "i", "w", "caught", "squares"):
        assert name in scope
    assert "z" not in scope
    assert "n" not in scope
    assert "err" not in scope


def test_functions_see_later_scope_changes():
    result, scope = run("def get():\n    return late\nreturn get\n")
    scope["late"] = "value"
    assert result() == "value"


def test_scope_fallthrough_used_for_globals():
    context = classloader.LoaderContext(host_globals={"greeting": "hello"})
    scope = classloader.new_file_scope(context.get_package("game"), "Thing")
    result, _ = run("return greeting + ' ' + str(len('abc'))\n", scope)
    assert result == "hello 3"


def test_syntax_error():
    with pytest.raises(SyntaxError):
        classloader.compile_source("def broken(:\n", "<test>")


def test_compile_file(tmp_path):
    path = tmp_path / "thing.py"
    path.write_text("return 'from file'\n")
    unit = classloader.compile_file(path)
    assert unit.filename == str(path)
    assert unit({}) == "from file"


def test_traceback_line_numbers(tmp_path):
    path = tmp_path / "thing.py"
    path.write_text("x = 1\n\nraise RuntimeError('boom')\n")
    unit = classloader.compile_file(path)
    with pytest.raises(RuntimeError) as info:
        unit({})
    # pytest traceback line numbers are 0-based
    assert info.traceback[-1].lineno == 2


def test_list_directory(tmp_path):
    loadertest.write_tree(tmp_path, {
        "b_file.py": "",
        "a_file.py": "",
        "notes.txt": "",
        ".hidden.py": "",
        "sub/x.py": "",
        "__pycache__/cached.py": "",
        ".git/config.py": "",
    })
    listing = classloader.list_directory(tmp_path)
    assert listing.files == ["a_file.py", "b_file.py"]
    assert listing.directories == ["sub"]


def test_list_directory_extension(tmp_path):
    loadertest.write_tree(tmp_path, {"a.py": "", "b.src": ""})
    assert classloader.list_directory(tmp_path, "src").files == ["b.src"]
    assert classloader.list_directory(tmp_path, ".src").files == ["b.src"]


def test_list_missing_directory(tmp_path):
    listing = classloader.list_directory(tmp_path / "missing")
    assert listing.files == []
    assert listing.directories == []

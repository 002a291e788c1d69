"""Find and compile the source files of a tree.

Source files are ordinary Python with two differences in how they run:

- The top level may `return` a value, which becomes the file's result.
- The file's globals are a FileScope, so names the file does not define
  itself are looked up through its package and the base environment.

To allow the `return`, the module body is compiled as the body of a
function. Every name bound at the top level is declared `global` in that
function, so top-level assignments still land in the file scope.
"""

__all__ = ["DirectoryListing", "list_directory", "SourceUnit", "compile_source", "compile_file"]

import ast
import types
from dataclasses import dataclass, field
from pathlib import Path


_BODY_NAME = "__file_body__"


@dataclass
class DirectoryListing:
    """Contents of one directory of the source tree.

    Attributes:
        files: Source file names, sorted
        directories: Subdirectory names, sorted
    """

    files: list[str] = field(default_factory=list)
    directories: list[str] = field(default_factory=list)


def list_directory(directory: str | Path, extension: str = ".py") -> DirectoryListing:
    """List the source files and subdirectories of a directory.

    Hidden entries and `__pycache__` are skipped. A directory that does not
    exist lists as empty.

    Args:
        directory: Directory to list
        extension: Suffix of source files, with or without the leading dot

    Returns:
        DirectoryListing with names in sorted order
    """
    if not extension.startswith("."):
        extension = "." + extension

    path = Path(directory)
    listing = DirectoryListing()
    if not path.is_dir():
        return listing

    for entry in sorted(path.iterdir(), key=lambda p: p.name):
        if entry.name.startswith(".") or entry.name == "__pycache__":
            continue
        if entry.is_dir():
            listing.directories.append(entry.name)
        elif entry.is_file() and entry.suffix == extension:
            listing.files.append(entry.name)
    return listing


class SourceUnit:
    """Compiled source file, ready to run in a scope.

    Args:
        code: Code object of the wrapped file body
        filename: Path used in tracebacks
    """

    def __init__(self, code: types.CodeType, filename: str):
        self.code = code
        self.filename = filename

    def __repr__(self):
        return f"SourceUnit<{self.filename}>"

    def __call__(self, scope: dict):
        """Run the file with scope as its globals and return its result."""
        body = types.FunctionType(self.code, scope, _BODY_NAME)
        return body()


def compile_source(source: str, filename: str = "<source>") -> SourceUnit:
    """Compile source text into a SourceUnit.

    Args:
        source: Python source of one file
        filename: Path used in tracebacks

    Raises:
        SyntaxError: Source is not valid
    """
    module = ast.parse(source, filename=filename)
    body = _FlattenAnnotations().visit(module).body or [ast.Pass()]

    bindings = _BindingCollector()
    for stmt in body:
        bindings.visit(stmt)
    if bindings.names:
        body = [ast.Global(names=sorted(bindings.names))] + body

    # Parse the wrapper instead of building it so every field matches the
    # running interpreter's ast
    wrapper = ast.parse(f"def {_BODY_NAME}():\n    pass\n", filename=filename)
    wrapper.body[0].body = body
    ast.fix_missing_locations(wrapper)

    code = compile(wrapper, filename, "exec")
    for const in code.co_consts:
        if isinstance(const, types.CodeType) and const.co_name == _BODY_NAME:
            return SourceUnit(const, filename)
    raise ValueError(f"Compiled body missing from {filename}")


def compile_file(path: str | Path) -> SourceUnit:
    """Read and compile a source file.

    Raises:
        OSError: File cannot be read
        SyntaxError: Source is not valid
    """
    path = Path(path)
    source = path.read_text(encoding="utf-8")
    return compile_source(source, str(path))


class _BindingCollector(ast.NodeVisitor):
    """Collect names bound by top-level statements.

    Does not descend into function, lambda or class bodies, which have their
    own scopes. Comprehension targets are skipped for the same reason, except
    for assignment expressions which bind in the enclosing scope.
    """

    def __init__(self):
        self.names = set()

    def visit_Name(self, node):
        if isinstance(node.ctx, (ast.Store, ast.Del)):
            self.names.add(node.id)

    def visit_FunctionDef(self, node):
        self.names.add(node.name)
        for decorator in node.decorator_list:
            self.visit(decorator)
        self.visit(node.args)
        if node.returns is not None:
            self.visit(node.returns)

    visit_AsyncFunctionDef = visit_FunctionDef

    def visit_Lambda(self, node):
        self.visit(node.args)

    def visit_ClassDef(self, node):
        self.names.add(node.name)
        for expr in node.decorator_list + node.bases + node.keywords:
            self.visit(expr)

    def visit_Import(self, node):
        for alias in node.names:
            self.names.add(alias.asname or alias.name.partition(".")[0])

    def visit_ImportFrom(self, node):
        for alias in node.names:
            if alias.name != "*":
                self.names.add(alias.asname or alias.name)

    def visit_ExceptHandler(self, node):
        if node.name:
            self.names.add(node.name)
        self.generic_visit(node)

    def visit_MatchAs(self, node):
        if node.name:
            self.names.add(node.name)
        self.generic_visit(node)

    def visit_MatchStar(self, node):
        if node.name:
            self.names.add(node.name)

    def visit_MatchMapping(self, node):
        if node.rest:
            self.names.add(node.rest)
        self.generic_visit(node)

    def _visit_comprehension(self, node):
        for child in ast.walk(node):
            if isinstance(child, ast.NamedExpr) and isinstance(child.target, ast.Name):
                self.names.add(child.target.id)

    visit_ListComp = _visit_comprehension
    visit_SetComp = _visit_comprehension
    visit_DictComp = _visit_comprehension
    visit_GeneratorExp = _visit_comprehension


class _FlattenAnnotations(ast.NodeTransformer):
    """Turn top-level annotated assignments into plain ones.

    A name declared global cannot be annotated, so `x: int = 1` becomes
    `x = 1` and a bare `x: int` is dropped.
    """

    def visit_AnnAssign(self, node):
        if node.value is None:
            return ast.copy_location(ast.Pass(), node)
        assign = ast.Assign(targets=[node.target], value=node.value)
        return ast.copy_location(assign, node)

    def visit_FunctionDef(self, node):
        return node

    visit_AsyncFunctionDef = visit_FunctionDef
    visit_ClassDef = visit_FunctionDef
    visit_Lambda = visit_FunctionDef

"""Scope chains used while executing source files.

Name lookups in a file fall through four links, first match wins:

    file scope -> package -> base environment -> host globals

Writes always land in the file scope.
"""

__all__ = ["Scope", "MappingScope", "FileScope", "new_file_scope", "host_scope"]

import builtins
import collections

import classloader


class Scope:
    """One link of a name resolution chain.

    Args:
        parent: (Scope | None) Next link consulted on a miss
    """

    def __init__(self, parent=None):
        self.parent = parent

    def lookup(self, name):
        """Find a name in this link only. Raises KeyError on a miss."""
        raise KeyError(name)

    def resolve(self, name):
        """Find a name in this link or any link after it.

        Raises:
            KeyError: No link defines the name
        """
        scope = self
        while scope is not None:
            try:
                return scope.lookup(name)
            except KeyError:
                scope = scope.parent
        raise KeyError(name)

    def chain(self):
        """(list[Scope]) This link and every link after it."""
        links = []
        scope = self
        while scope is not None:
            links.append(scope)
            scope = scope.parent
        return links


class MappingScope(Scope):
    """Scope link backed by a plain mapping."""

    def __init__(self, mapping, parent=None, label=None):
        super().__init__(parent)
        self.mapping = mapping
        self.label = label

    def lookup(self, name):
        return self.mapping[name]

    def __repr__(self):
        return f"MappingScope<{self.label or len(self.mapping)}>"


def host_scope(host_globals=None):
    """Build the last link of every chain.

    Args:
        host_globals: (Mapping | None) Extra names shared with every file

    Returns:
        (MappingScope) Link resolving host globals, then Python builtins
    """
    mapping = collections.ChainMap(dict(host_globals or {}), vars(builtins))
    return MappingScope(mapping, label="host")


class FileScope(dict):
    """Local bindings of one executing file.

    The dict itself holds the file's own bindings and is used directly as
    the globals of the file's code, so top-level assignments and functions
    defined in the file read and write it. Names missing from it are looked
    up through the file's package.

    Args:
        package: (Package) Package the file belongs to
        object_name: (str) Name of the object the file defines

    Attributes:
        package: (Package) Next link in the chain
        object_name: (str) Name of the placeholder this file fills in
    """

    def __init__(self, package, object_name):
        super().__init__()
        self.package = package
        self.object_name = object_name
        self["__builtins__"] = vars(builtins)
        self["__name__"] = f"{package.name}.{object_name}" if package.name else object_name

    def __missing__(self, name):
        return self.package.resolve(name)

    def resolve(self, name):
        """Find a name in the file's bindings or anywhere up its chain."""
        if dict.__contains__(self, name):
            return dict.__getitem__(self, name)
        return self.package.resolve(name)

    def chain(self):
        """(list) This scope followed by every link after it."""
        return [self] + self.package.chain()

    def __repr__(self):
        return f"FileScope<{self['__name__']}>"


def new_file_scope(package, object_name):
    """Create the scope a source file executes in.

    Args:
        package: (Package) Package the file belongs to
        object_name: (str) Name of the object the file defines

    Returns:
        (FileScope) Fresh, empty binding set rooted at package
    """
    if not isinstance(package, classloader.Package):
        raise classloader.InvalidArgumentError("File scopes must be rooted at a package")
    return FileScope(package, object_name)

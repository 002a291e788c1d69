"""Packages and the package registry"""

__all__ = ["Package", "PackageRegistry"]

import logging

import classloader


_logger = logging.getLogger(__name__)


class Package(classloader.Scope):
    """Namespace for the objects defined by the files of one directory.

    A package is also a link in the scope chain of its files, which makes
    every object of the package visible by name to each of them.

    Args:
        name: (str) Dotted package name ("" for the base directory)
        parent: (Scope | None) Next link in the scope chain
        host_globals: (Scope | None) Host global scope

    Attributes:
        name: (str) Dotted package name
        members: (dict) Object name to RuntimeObject, in discovery order
        host_globals: (Scope | None) Host global scope
    """

    kind = "Package"

    def __init__(self, name, parent=None, host_globals=None):
        super().__init__(parent)
        self.name = name
        self.members = {}
        self.host_globals = host_globals

    def __repr__(self):
        return f"Package<{self.name or '<root>'}>"

    def lookup(self, name):
        return self.members[name]

    def ensure(self, object_name):
        """Get a member, registering an empty placeholder if it is missing.

        Args:
            object_name: (str) Object name inside this package

        Returns:
            (RuntimeObject) Existing object or new placeholder
        """
        obj = self.members.get(object_name)
        if obj is None:
            obj = classloader.RuntimeObject(object_name, self.name)
            self.members[object_name] = obj
        return obj

    def public_members(self):
        """(list[tuple[str, object]]) Members not using the metadata prefix."""
        return [(name, obj) for name, obj in self.members.items()
                if not classloader.is_metadata(name)]

    @property
    def is_empty(self):
        """(bool) Package holds nothing but metadata."""
        return not self.public_members()


class PackageRegistry:
    """Cache of every package created while loading.

    Args:
        root: (Scope | None) Link new packages delegate to
        host_globals: (Scope | None) Host global scope given to new packages

    Attributes:
        root: (Scope | None) Link new packages delegate to
    """

    def __init__(self, root=None, host_globals=None):
        self.root = root
        self.host_globals = host_globals
        self._packages = {}

    def get(self, name):
        """Get a package, creating an empty one if needed.

        Never loads any files; callers are responsible for that.

        Args:
            name: (str) Dotted package name

        Returns:
            (Package) Cached or newly created package

        Raises:
            InvalidArgumentError: Name is not a string
        """
        if not isinstance(name, str):
            raise classloader.InvalidArgumentError("The package location must be provided as a string")

        package = self._packages.get(name)
        if package is not None:
            return package

        package = Package(name, parent=self.root, host_globals=self.host_globals)
        self._packages[name] = package
        _logger.debug("Created package %r", name)
        return package

    def discard(self, name):
        """Remove a package from the registry if present."""
        self._packages.pop(name, None)

    def clear(self):
        self._packages.clear()

    def names(self):
        """(list[str]) Registered package names, in creation order."""
        return list(self._packages)

    def packages(self):
        """(list[Package]) Registered packages, in creation order."""
        return list(self._packages.values())

    def __contains__(self, name):
        return name in self._packages

    def __iter__(self):
        return iter(self._packages.values())

    def __len__(self):
        return len(self._packages)

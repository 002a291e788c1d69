"""Per-loader state shared by the import, synthesis and loading code."""

__all__ = ["LoaderContext"]

import contextlib
import logging

import classloader


_logger = logging.getLogger(__name__)


class LoaderContext:
    """State of one load: packages, base environment and current cursor.

    Every Loader owns one context, so separate loads never share packages.
    The cursor names the package and file currently executing. It is
    changed only through `cursor()`, which restores the previous values when
    a nested or lazy load returns.

    Args:
        host_globals: (Mapping | None) Extra names visible to every file

    Attributes:
        host: (MappingScope) Host global scope, last link of every chain
        environment: (MappingScope | None) Base environment with the
            Import, Class, Singleton, Enum and Extends helpers
        registry: (PackageRegistry) Packages by dotted name
        current_package: (Package | None) Package of the executing file
        current_file: (FileScope | None) Scope of the executing file
        loader: (Loader | None) Loader used for lazy package loads
        loaded_files: (set[str]) Paths of files already executed
        prepared_packages: (set[str]) Packages whose directory was listed
        finalized: (bool) Load finished and helpers were detached
    """

    def __init__(self, host_globals=None):
        self.host = classloader.host_scope(host_globals)
        self.environment = classloader.create_base_environment(self, self.host)
        self.registry = classloader.PackageRegistry(root=self.environment, host_globals=self.host)
        self.current_package = None
        self.current_file = None
        self.loader = None
        self.loaded_files = set()
        self.prepared_packages = set()
        self.finalized = False

    def __repr__(self):
        return f"LoaderContext<{len(self.registry)} packages>"

    def get_package(self, name):
        """Get or create a package by dotted name. See PackageRegistry.get."""
        return self.registry.get(name)

    @property
    def current_package_name(self):
        """(str) Name of the current package, root package when idle."""
        if self.current_package is None:
            return ""
        return self.current_package.name

    @contextlib.contextmanager
    def cursor(self, package, file_scope=None):
        """Temporarily make package and file_scope the executing ones."""
        saved = self.current_package, self.current_file
        self.current_package, self.current_file = package, file_scope
        try:
            yield self
        finally:
            self.current_package, self.current_file = saved

    def current_object(self):
        """Object defined by the currently executing file.

        Raises:
            ResolutionError: No file is executing
        """
        if self.current_file is None:
            raise classloader.ResolutionError("Object constructors may only be called while a file loads")
        return self.current_file.package.ensure(self.current_file.object_name)

    def bind(self, name, obj):
        """Add a name to the current file's bindings, if a file is executing."""
        if self.current_file is not None:
            self.current_file[name] = obj

    def finalize(self):
        """Detach the base environment and drop packages with no objects.

        Packages keep the host global scope as their next link, so functions
        defined in files can still reach host globals after loading.
        """
        self.registry.root = self.host
        for package in self.registry.packages():
            package.parent = self.host
            if package.is_empty:
                self.registry.discard(package.name)
                _logger.debug("Removed empty package %r", package.name)
        self.finalized = True

    def release(self):
        """Forget every package and the base environment."""
        self.registry.clear()
        self.environment = None
        self.current_package = None
        self.current_file = None
        self.loaded_files.clear()
        self.prepared_packages.clear()
        self.loader = None

"""Load a directory tree of source files and invoke its entry point.

The loader walks the base directory depth first. Each directory becomes a
package named by its dotted path from the base directory. Before any file of
a directory runs, a placeholder object is registered for every file, so files
can refer to each other in any order. Each file then runs in its own scope and
its result is stored as the package member.

Once the whole tree is loaded the base environment is detached, empty
packages are dropped and `Main` is called on the entry point singleton.
"""

__all__ = ["LoaderState", "LoaderConfig", "Loader", "bootstrap"]

import enum
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

import classloader


_logger = logging.getLogger(__name__)


class LoaderState(enum.Enum):
    """Stage of a Loader's run."""

    IDLE = "idle"
    PREPARING_PACKAGE = "preparing-package"
    LOADING_FILE = "loading-file"
    FINALIZING = "finalizing"
    INVOKING = "invoking"
    DONE = "done"
    FAILED = "failed"


@dataclass
class LoaderConfig:
    """Settings for one load.

    Attributes:
        base_directory: Root of the source tree, the root package
        entry_point: Location of the singleton whose Main is invoked
        extension: Suffix of source files
        host_globals: Extra names visible at the end of every scope chain
    """

    base_directory: str | Path
    entry_point: str
    extension: str = ".py"
    host_globals: Mapping | None = None


class Loader:
    """Loads one source tree and runs its entry point.

    Typical use goes through `bootstrap()`. The individual stages are public
    so tools and tests can inspect packages between loading and invoking:

        >>> loader = Loader(LoaderConfig("game", "game.Main"))
        >>> loader.load()
        >>> loader.context.registry.names()
        ['game', 'game.ui']
        >>> loader.invoke()
        >>> loader.close()

    Args:
        config: (LoaderConfig) Settings for this load

    Attributes:
        config: (LoaderConfig) Settings for this load
        base_directory: (Path) Root of the source tree
        state: (LoaderState) Current stage
        context: (LoaderContext) Packages and cursor of this load
    """

    def __init__(self, config):
        self.config = config
        self.base_directory = Path(config.base_directory)
        self.state = LoaderState.IDLE
        self.context = classloader.LoaderContext(config.host_globals)
        self.context.loader = self

    def __repr__(self):
        return f"Loader<{self.base_directory} {self.state.value}>"

    def run(self):
        """Load the tree, invoke the entry point and release all state.

        Returns:
            Whatever the entry point's Main returned

        Raises:
            LoaderError: Any stage failed; the loader is left FAILED
        """
        _logger.info("Bootstrapping %s with entry point %s",
                     self.base_directory, self.config.entry_point)
        try:
            self.load()
            result = self.invoke()
        except BaseException:
            self.state = LoaderState.FAILED
            raise
        self.close()
        _logger.info("Bootstrap of %s finished", self.base_directory)
        return result

    def load(self):
        """Load every file of the tree, then finalize the packages."""
        try:
            self.load_directory(self.base_directory)
            self.finalize()
        except BaseException:
            self.state = LoaderState.FAILED
            raise

    def package_name(self, directory):
        """Dotted package name of a directory inside the tree."""
        relative = Path(directory).relative_to(self.base_directory)
        return ".".join(relative.parts)

    def package_directory(self, package_name):
        """Directory holding the files of a package."""
        if not package_name:
            return self.base_directory
        return self.base_directory.joinpath(*package_name.split("."))

    def load_directory(self, directory, import_mode=False):
        """Prepare and load one directory.

        Args:
            directory: (str | Path) Directory inside the tree
            import_mode: (bool) Only load this directory's own files, used
                for packages loaded lazily by a wildcard import

        Returns:
            (Package) Package of the directory
        """
        directory = Path(directory)
        listing = classloader.list_directory(directory, self.config.extension)
        package = self.prepare_package(directory, listing)

        with self.context.cursor(package):
            for file_name in listing.files:
                self.load_file(directory / file_name)

        if not import_mode:
            for directory_name in listing.directories:
                self.load_directory(directory / directory_name)
        return package

    def load_package(self, package_name):
        """Load a package's directory in import mode."""
        return self.load_directory(self.package_directory(package_name), import_mode=True)

    def prepare_package(self, directory, listing):
        """Create a directory's package and a placeholder for each file.

        Args:
            directory: (Path) Directory inside the tree
            listing: (DirectoryListing) Contents of the directory

        Returns:
            (Package) Package of the directory
        """
        self.state = LoaderState.PREPARING_PACKAGE
        package_name = self.package_name(directory)
        package = self.context.get_package(package_name)
        self.context.prepared_packages.add(package_name)

        seen = {}
        for file_name in listing.files:
            object_name = classloader.to_member_name(Path(file_name).stem)
            if object_name in seen:
                _logger.warning("Files %s and %s in %s both define %s",
                                seen[object_name], file_name, directory, object_name)
            seen[object_name] = file_name
            package.ensure(object_name)

        _logger.debug("Prepared package %r with %d files", package_name, len(listing.files))
        return package

    def load_file(self, path):
        """Run one source file and register the object it returns.

        Files that already ran, for example through a lazy package load, are
        skipped.

        Args:
            path: (str | Path) Source file inside the tree

        Raises:
            InvalidObjectError: The file did not return an object
        """
        path = Path(path)
        key = str(path.resolve())
        if key in self.context.loaded_files:
            return
        self.context.loaded_files.add(key)

        self.state = LoaderState.LOADING_FILE
        package = self.context.get_package(self.package_name(path.parent))
        object_name = classloader.to_member_name(path.stem)
        _logger.debug("Loading %s as %s", path, object_name)

        unit = classloader.compile_file(path)
        scope = classloader.new_file_scope(package, object_name)
        with self.context.cursor(package, scope):
            result = unit(scope)

        self.register_object(package, object_name, result)

    def register_object(self, package, object_name, result):
        """Store the result of a file as a package member.

        Args:
            package: (Package) Package of the file
            object_name: (str) Name of the file's object
            result: Value the file returned

        Returns:
            (RuntimeObject) Registered object
        """
        location = f"{package.name}.{object_name}" if package.name else object_name
        if not isinstance(result, classloader.RuntimeObject):
            raise classloader.InvalidObjectError(f"Invalid object returned by: {location}", location)

        obj = package.ensure(object_name)
        if result is not obj:
            classloader.merge_object(obj, result)
        obj._name = object_name
        obj._package = package.name

        if classloader.is_default_extends(self.context, obj):
            del obj.Extends

        if obj.__kind__ is classloader.ObjectKind.ENUM:
            classloader.finalize_enum(obj)

        package.members[object_name] = obj
        return obj

    def finalize(self):
        """Detach the base environment and drop packages with no objects."""
        self.state = LoaderState.FINALIZING
        self.context.finalize()

    def invoke(self, entry_point=None):
        """Call Main on the entry point singleton.

        Args:
            entry_point: (str | None) Location to use instead of the
                configured one

        Returns:
            Whatever Main returned

        Raises:
            MissingEntryPointError: No file defined the entry point
            InvalidEntryPointError: Entry point is not a singleton
            NoMainMethodError: Entry point has no Main member
        """
        self.state = LoaderState.INVOKING
        location = entry_point if entry_point is not None else self.config.entry_point
        try:
            entry = classloader.import_object(self.context, location)

            if isinstance(entry, list):
                raise classloader.InvalidEntryPointError(
                    f"The start class location {location!r} names a package")
            if entry.__kind__ is classloader.ObjectKind.PLACEHOLDER:
                raise classloader.MissingEntryPointError(
                    f"The start class couldn't be found at: {location}")
            if entry.__kind__ is not classloader.ObjectKind.SINGLETON:
                raise classloader.InvalidEntryPointError(
                    f"The start class may only be a singleton, {location} is a {entry.__kind__.value}")
            try:
                main = entry.Main
            except AttributeError:
                raise classloader.NoMainMethodError(
                    f"The start class {location} doesn't have a main method") from None

            _logger.debug("Invoking %s.Main", location)
            return main()
        except BaseException:
            self.state = LoaderState.FAILED
            raise

    def close(self):
        """Release every package and the base environment."""
        self.context.release()
        self.state = LoaderState.DONE


def bootstrap(base_directory, entry_point, extension=".py", host_globals=None):
    """Load a source tree and call Main on its entry point.

    Every call starts from an empty package registry.

    Args:
        base_directory: (str) Root directory of the source tree
        entry_point: (str) Location of the entry point singleton
        extension: (str) Suffix of source files
        host_globals: (Mapping | None) Extra names visible to every file

    Returns:
        Whatever the entry point's Main returned

    Raises:
        InvalidArgumentError: base_directory or entry_point is not a string
        LoaderError: Loading or invoking failed
    """
    if not isinstance(base_directory, str):
        raise classloader.InvalidArgumentError("The base directory must be provided as a string")
    if not isinstance(entry_point, str):
        raise classloader.InvalidArgumentError("The start class location must be provided as a string")

    config = LoaderConfig(base_directory, entry_point, extension=extension, host_globals=host_globals)
    return Loader(config).run()

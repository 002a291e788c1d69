"""Resolve locations to objects for the Import helper.

Handles:
- Absolute locations, "game.ui.Hud" or "game.ui.cl_hud"
- Relative locations with no dot, resolved in the importing file's package
- Wildcard locations, "game.ui.*", returning every object of a package

Objects that have not been loaded yet are returned as placeholders. They are
filled in place when their file runs, so forward and circular references
work.
"""

__all__ = ["import_object", "import_package"]

import logging

import classloader


_logger = logging.getLogger(__name__)


def import_object(context, location):
    """Resolve a location and bind the result into the importing file.

    Args:
        context: (LoaderContext) Active load
        location: (str) Location to import

    Returns:
        (RuntimeObject | list[RuntimeObject]) The object, or for wildcard
        locations every object of the package in discovery order

    Raises:
        InvalidArgumentError: Location is not a valid location string
    """
    parsed = classloader.parse_location(location)
    package_name = parsed.package_name(context.current_package_name)

    if parsed.wildcard:
        return import_package(context, package_name)

    package = context.get_package(package_name)
    object_name = classloader.to_member_name(parsed.last_segment)
    obj = package.ensure(object_name)
    context.bind(object_name, obj)
    _logger.debug("Imported %s.%s", package_name, object_name)
    return obj


def import_package(context, package_name):
    """Bind every object of a package into the importing file.

    The package's directory is loaded in import mode first if it has not
    been listed yet.

    Args:
        context: (LoaderContext) Active load
        package_name: (str) Dotted package name

    Returns:
        (list[RuntimeObject]) Objects of the package in discovery order
    """
    if package_name not in context.prepared_packages and context.loader is not None:
        _logger.debug("Lazy loading package %r", package_name)
        context.loader.load_package(package_name)

    package = context.get_package(package_name)
    objects = []
    for name, obj in package.public_members():
        context.bind(name, obj)
        objects.append(obj)
    return objects

"""Single inheritance between class objects"""

__all__ = ["extend_object"]

import logging

import classloader


_logger = logging.getLogger(__name__)


def extend_object(context, cls, super_ref):
    """Make super_ref the superclass of cls.

    Member lookups that miss cls continue on the superclass, and from there
    up its own chain. Extending again replaces the previous link. A link
    that would make cls its own ancestor is rejected.

    Args:
        context: (LoaderContext) Active load, used for string references
        cls: (RuntimeObject) Object being extended
        super_ref: (RuntimeObject | str) Superclass or its location

    Returns:
        (RuntimeObject) cls

    Raises:
        InvalidArgumentError: cls is not an object, or super_ref is neither
            an object nor a location
        ResolutionError: super_ref names something that is not an object,
            or the link would create a cycle
    """
    if not isinstance(cls, classloader.RuntimeObject):
        raise classloader.InvalidArgumentError("The class being extended must be an object")

    if isinstance(super_ref, str):
        resolved = classloader.import_object(context, super_ref)
        if not isinstance(resolved, classloader.RuntimeObject):
            raise classloader.ResolutionError(
                f"The super class name {super_ref!r} didn't resolve to an object")
        super_ref = resolved
    elif not isinstance(super_ref, classloader.RuntimeObject):
        raise classloader.InvalidArgumentError("Classes may only be extended by objects or names")

    for ancestor in classloader.delegation_chain(super_ref):
        if ancestor is cls:
            raise classloader.ResolutionError(
                f"Extending {cls.__location__} with {super_ref.__location__} creates an inheritance cycle")

    if cls._super is not None and cls._super is not super_ref:
        _logger.debug("Replacing super class of %s: %s -> %s",
                      cls.__location__, cls._super.__location__, super_ref.__location__)
    cls._super = super_ref
    return cls

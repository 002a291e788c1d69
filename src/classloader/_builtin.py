"""Base environment offered to every file while the tree loads.

Files see these helpers as plain names:

    Import(location)     Resolve and bind another object or package
    Class()              Make this file's object a class
    Singleton()          Make this file's object a singleton
    Enum()               Make this file's object an enum
    Extends(cls, super)  Set the superclass of a class
"""

__all__ = ["create_base_environment", "is_default_extends"]

import types

import classloader


def create_base_environment(context, parent):
    """Build the base environment scope bound to one loader context.

    Args:
        context: (LoaderContext) Load whose cursor the helpers act on
        parent: (Scope) Host global scope

    Returns:
        (MappingScope) Scope link holding the helpers
    """

    def Import(location):
        return classloader.import_object(context, location)

    def Extends(cls, super_ref):
        return classloader.extend_object(context, cls, super_ref)

    def Class():
        cls = context.current_object()
        classloader.assign_kind(cls, classloader.ObjectKind.CLASS)
        cls.New = types.MethodType(classloader.instantiate, cls)
        cls.Extends = types.MethodType(Extends, cls)
        return cls

    def Singleton():
        singleton = context.current_object()
        return classloader.assign_kind(singleton, classloader.ObjectKind.SINGLETON)

    def Enum():
        # Values stay raw until the file returns, see finalize_enum
        enum = context.current_object()
        return classloader.assign_kind(enum, classloader.ObjectKind.ENUM)

    helpers = {
        "Import": Import,
        "Extends": Extends,
        "Class": Class,
        "Singleton": Singleton,
        "Enum": Enum,
    }
    return classloader.MappingScope(helpers, parent=parent, label="base")


def is_default_extends(context, obj):
    """(bool) The object's own Extends member is still the one Class() attached."""
    member = obj._members.get("Extends")
    if not isinstance(member, types.MethodType) or context.environment is None:
        return False
    return member.__self__ is obj and member.__func__ is context.environment.mapping["Extends"]

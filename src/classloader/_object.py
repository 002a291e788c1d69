"""Runtime objects defined by source files.

Every source file defines exactly one object. The object is created empty as
a placeholder before any file runs, then given its kind by the `Class`,
`Singleton` or `Enum` constructor the file calls. Member lookups walk an
explicit delegation chain instead of relying on Python class machinery:

    instance -> class -> superclass -> ... -> root class
"""

__all__ = [
    "ObjectKind",
    "RuntimeObject",
    "Instance",
    "is_metadata",
    "resolve_member",
    "delegation_chain",
    "public_members",
    "assign_kind",
    "merge_object",
    "instantiate",
    "class_of",
]

import enum
import types

import classloader


class ObjectKind(enum.Enum):
    """Kind of a runtime object, assigned once by its constructor."""

    PLACEHOLDER = "Placeholder"
    CLASS = "Class"
    SINGLETON = "Singleton"
    ENUM = "Enum"


def is_metadata(name):
    """(bool) Member name uses the reserved metadata prefix."""
    return name.startswith("__")


class RuntimeObject:
    """Class, singleton or enum defined by a source file.

    Members are read and written with attribute syntax. Reads that miss the
    object's own members continue through its superclass chain. Functions
    read from a singleton are bound to it, so a `Main(self)` member can be
    called as `entry.Main()`.

    Args:
        name: (str | None) Object name inside its package
        package: (str | None) Dotted name of the owning package

    Attributes:
        __name__: (str | None) Object name inside its package
        __package__: (str | None) Dotted name of the owning package
        __kind__: (ObjectKind) Kind assigned by the file's constructor
        __super__: (RuntimeObject | None) Superclass link set by Extends
    """

    __slots__ = ("_members", "_kind", "_name", "_package", "_super", "_enum_values")

    def __init__(self, name=None, package=None):
        object.__setattr__(self, "_members", {})
        object.__setattr__(self, "_kind", ObjectKind.PLACEHOLDER)
        object.__setattr__(self, "_name", name)
        object.__setattr__(self, "_package", package)
        object.__setattr__(self, "_super", None)
        object.__setattr__(self, "_enum_values", None)

    @property
    def __name__(self):
        return self._name

    @property
    def __package__(self):
        return self._package

    @property
    def __kind__(self):
        return self._kind

    @property
    def __super__(self):
        return self._super

    @property
    def __location__(self):
        """(str | None) Dotted location of this object."""
        if self._name is None:
            return None
        if self._package:
            return f"{self._package}.{self._name}"
        return self._name

    def __getattr__(self, name):
        if name in RuntimeObject.__slots__:
            raise AttributeError(name)
        try:
            value = resolve_member(self, name)
        except KeyError:
            raise AttributeError(
                f"{self._kind.value} {self.__location__ or '<anonymous>'} has no member {name!r}"
            ) from None
        if self._kind is ObjectKind.SINGLETON:
            return _bind(value, self)
        return value

    def __setattr__(self, name, value):
        if name in RuntimeObject.__slots__:
            object.__setattr__(self, name, value)
        else:
            self._members[name] = value

    def __delattr__(self, name):
        try:
            del self._members[name]
        except KeyError:
            raise AttributeError(name) from None

    def __repr__(self):
        return f"<{self._kind.value} {self.__location__ or '<anonymous>'}>"


class Instance:
    """Instance produced by a class's `New` member.

    Own members live on the instance; everything else is looked up through
    the class and its superclasses. Functions found that way are bound to
    the instance.
    """

    __slots__ = ("_members", "_class")

    def __init__(self, cls):
        object.__setattr__(self, "_members", {})
        object.__setattr__(self, "_class", cls)

    def __getattr__(self, name):
        if name in Instance.__slots__:
            raise AttributeError(name)
        try:
            value = resolve_member(self, name)
        except KeyError:
            raise AttributeError(
                f"Instance of {self._class.__location__ or '<anonymous>'} has no member {name!r}"
            ) from None
        return _bind(value, self)

    def __setattr__(self, name, value):
        self._members[name] = value

    def __delattr__(self, name):
        try:
            del self._members[name]
        except KeyError:
            raise AttributeError(name) from None

    def __repr__(self):
        return f"<Instance of {self._class.__location__ or '<anonymous>'}>"


def _bind(value, receiver):
    if isinstance(value, types.FunctionType):
        return types.MethodType(value, receiver)
    return value


def delegation_chain(target):
    """Iterate the objects consulted when resolving a member of target.

    Args:
        target: (RuntimeObject | Instance) Object to start from

    Returns:
        Iterator over the instance (if any), its class, then each superclass
    """
    if isinstance(target, Instance):
        yield target
        target = target._class
    while target is not None:
        yield target
        target = target._super


def resolve_member(target, name):
    """Find a member by walking the delegation chain of target.

    Args:
        target: (RuntimeObject | Instance) Object to start from
        name: (str) Member name

    Returns:
        Raw member value, without any binding

    Raises:
        KeyError: No object in the chain has the member
    """
    for link in delegation_chain(target):
        members = link._members
        if name in members:
            return members[name]
    raise KeyError(name)


def public_members(obj):
    """List (name, value) pairs of members not using the metadata prefix."""
    return [(name, value) for name, value in obj._members.items() if not is_metadata(name)]


def assign_kind(obj, kind):
    """Give a placeholder its kind.

    Args:
        obj: (RuntimeObject) Object to tag
        kind: (ObjectKind) New kind

    Raises:
        InvalidObjectError: Object already has a different kind
    """
    if obj._kind is kind:
        return obj
    if obj._kind is not ObjectKind.PLACEHOLDER:
        raise classloader.InvalidObjectError(
            f"{obj.__location__ or 'Object'} is already a {obj._kind.value}, "
            f"cannot redefine it as {kind.value}",
            obj.__location__,
        )
    obj._kind = kind
    return obj


def merge_object(placeholder, result):
    """Merge the object a file returned into its pre-registered placeholder.

    Keeps the placeholder's identity so references taken before the file ran
    see the finished object.
    """
    if result._kind is not ObjectKind.PLACEHOLDER:
        assign_kind(placeholder, result._kind)
    placeholder._members.update(result._members)
    if result._super is not None:
        placeholder._super = result._super
    return placeholder


def instantiate(cls):
    """Create an empty instance whose lookups delegate to cls."""
    if not isinstance(cls, RuntimeObject) or cls._kind is not ObjectKind.CLASS:
        raise classloader.InvalidArgumentError("Only classes can be instantiated")
    return Instance(cls)


def class_of(instance):
    """(RuntimeObject) Class an instance was created from."""
    return instance._class

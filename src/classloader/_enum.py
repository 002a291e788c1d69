"""Enumeration values and enum finalization"""

__all__ = ["EnumValue", "finalize_enum"]

import logging
import types

import classloader


_logger = logging.getLogger(__name__)


class EnumValue:
    """Immutable named value belonging to an enum.

    Arithmetic operates on the raw values and returns a raw value, not a new
    EnumValue. Comparisons also use the raw values. The other operand may be
    another EnumValue or a plain value.

        >>> Color.RED + Color.GREEN
        3
        >>> Color.RED < Color.GREEN
        True

    Args:
        name: (str) Member name in the enum
        value: Raw value declared for the member
        enum: (RuntimeObject) Enum declaring the member
    """

    __slots__ = ("_name", "_value", "_enum")

    def __init__(self, name, value, enum):
        object.__setattr__(self, "_name", name)
        object.__setattr__(self, "_value", value)
        object.__setattr__(self, "_enum", enum)

    def __setattr__(self, name, value):
        raise AttributeError(f"Enum value {self._name} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"Enum value {self._name} is immutable")

    def GetName(self):
        return self._name

    def GetValue(self):
        return self._value

    def GetEnum(self):
        return self._enum

    def __repr__(self):
        enum_name = self._enum.__name__ if self._enum is not None else "?"
        return f"<EnumValue {enum_name}.{self._name}={self._value!r}>"

    def __hash__(self):
        return hash(self._value)

    def __eq__(self, other):
        return self._value == _raw(other)

    def __ne__(self, other):
        return self._value != _raw(other)

    def __lt__(self, other):
        return self._value < _raw(other)

    def __le__(self, other):
        return self._value <= _raw(other)

    def __gt__(self, other):
        return self._value > _raw(other)

    def __ge__(self, other):
        return self._value >= _raw(other)

    def __add__(self, other):
        return self._value + _raw(other)

    def __radd__(self, other):
        return _raw(other) + self._value

    def __sub__(self, other):
        return self._value - _raw(other)

    def __rsub__(self, other):
        return _raw(other) - self._value

    def __mul__(self, other):
        return self._value * _raw(other)

    def __rmul__(self, other):
        return _raw(other) * self._value

    def __truediv__(self, other):
        return self._value / _raw(other)

    def __rtruediv__(self, other):
        return _raw(other) / self._value

    def __mod__(self, other):
        return self._value % _raw(other)

    def __rmod__(self, other):
        return _raw(other) % self._value


def _raw(value):
    if isinstance(value, EnumValue):
        return value._value
    return value


def finalize_enum(enum):
    """Wrap every member of a completed enum in an EnumValue.

    Runs after the enum's file has returned, so the file is free to read and
    write raw values while it builds the enum. Members are wrapped in
    declaration order, which is also the order `GetValues()` reports.
    Finalizing an enum twice leaves it unchanged.

    Args:
        enum: (RuntimeObject) Object of kind ENUM

    Returns:
        (tuple[EnumValue, ...]) All values of the enum

    Raises:
        InvalidObjectError: Object is not an enum
    """
    if not isinstance(enum, classloader.RuntimeObject) or enum.__kind__ is not classloader.ObjectKind.ENUM:
        raise classloader.InvalidObjectError(f"Cannot finalize {enum!r} as an enum")

    if enum._enum_values is not None:
        return enum._enum_values

    values = []
    for name, raw in classloader.public_members(enum):
        value = EnumValue(name, raw, enum)
        enum._members[name] = value
        values.append(value)

    enum._enum_values = tuple(values)
    enum._members["GetValues"] = types.MethodType(_get_values, enum)
    enum._members["GetValueOf"] = types.MethodType(_get_value_of, enum)
    _logger.debug("Finalized enum %s with %d values", enum.__location__, len(values))
    return enum._enum_values


def _get_values(enum):
    return enum._enum_values


def _get_value_of(enum, name):
    for value in enum._enum_values:
        if value._name == name:
            return value
    return None

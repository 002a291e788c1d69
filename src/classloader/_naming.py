"""Convert file and location names into object names."""

__all__ = ["REALM_PREFIXES", "to_member_name", "split_location"]

import re

import classloader


REALM_PREFIXES = ("cl_", "sv_", "sh_")

_underscore_lower = re.compile(r"_([a-z])")


def to_member_name(segment):
    """Transform the last segment of a location into an object name.

    Realm prefixes (client, server and shared) are stripped, the first letter
    and every lowercase letter after an underscore are capitalised, and the
    underscores are removed.

        >>> to_member_name("cl_player_data")
        'PlayerData'
        >>> to_member_name("utility")
        'Utility'

    Args:
        segment: (str) Final segment of a dotted location or file stem

    Returns:
        (str) Object name

    Raises:
        InvalidArgumentError: The segment is empty
    """
    if not isinstance(segment, str):
        raise classloader.InvalidArgumentError(
            f"Object names are built from strings, got {type(segment).__name__}")

    if segment[:3] in REALM_PREFIXES:
        segment = segment[3:]
    if not segment:
        raise classloader.InvalidArgumentError("Cannot build an object name from an empty segment")

    name = segment[0].upper() + segment[1:]
    name = _underscore_lower.sub(lambda m: "_" + m.group(1).upper(), name)
    return name.replace("_", "")


def split_location(location):
    """Split a dotted location on its final dot.

    Args:
        location: (str) Dotted location like "game.ui.cl_hud"

    Returns:
        (tuple[str, str]) Package prefix ("" when there is no dot) and the
        last segment
    """
    prefix, _, last = location.rpartition(".")
    return prefix, last

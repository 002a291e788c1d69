"""Parse location strings used by Import and Extends.

Locations are dotted paths into the package tree. A location without any dot
is relative to the package of the file doing the import, and a trailing `*`
selects every object in a package.
"""

__all__ = ["Location", "parse_location"]

from dataclasses import dataclass

import lark

import classloader


@dataclass(frozen=True)
class Location:
    """Parsed location string.

    Attributes:
        text: Original location string
        segments: Dotted name segments, without any wildcard
        wildcard: Location selects every object of a package
    """

    text: str
    segments: tuple[str, ...]
    wildcard: bool

    @property
    def is_relative(self) -> bool:
        """(bool) Location is resolved against the current package."""
        if self.wildcard:
            return not self.segments
        return len(self.segments) == 1

    def package_name(self, current_package: str) -> str:
        """Name of the package this location points into.

        Args:
            current_package: Package name used for relative locations

        Returns:
            Dotted package name ("" for the root package)
        """
        if self.is_relative:
            return current_package
        if self.wildcard:
            return ".".join(self.segments)
        return ".".join(self.segments[:-1])

    @property
    def last_segment(self) -> str | None:
        """(str | None) Object segment, or None for wildcard locations."""
        if self.wildcard:
            return None
        return self.segments[-1]


def parse_location(text):
    """Parse a location string.

    Args:
        text: (str) Location like "game.ui.cl_hud", "Hud" or "game.ui.*"

    Returns:
        (Location) Parsed location

    Raises:
        InvalidArgumentError: Location is not a string or not a valid location
    """
    if not isinstance(text, str):
        raise classloader.InvalidArgumentError(
            f"Objects may only be imported by their location, got {type(text).__name__}")

    parser = _lark_parser("location")
    try:
        tree = parser.parse(text)
    except lark.exceptions.LarkError as err:
        raise classloader.InvalidArgumentError(f"Invalid location {text!r}: {err}") from err

    segments = []
    wildcard = False
    for token in tree.children:
        match token.type:
            case "SEGMENT":
                segments.append(str(token))
            case "WILDCARD":
                wildcard = True
            case _:
                raise ValueError(f"Unhandled location token: {token.type}")
    return Location(text, tuple(segments), wildcard)


_parsers = {}


def _lark_parser(name):
    """Get globally shared lark parser.

    Args:
        name: (str) name of the grammar file (without .lark)

    Returns:
        (lark.Lark) Parser instance
    """
    parser = _parsers.get(name)
    if parser is not None:
        return parser

    path = f"lark/{name}.lark"
    parser = lark.Lark.open(path, rel_to=__file__, parser="lalr")
    _parsers[name] = parser
    return parser

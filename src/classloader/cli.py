"""Command-line interface for the class loader.

Loads a source tree and calls Main on its entry point:

    classloader game game.Main
    classloader game game.Main --packages     # Show packages, skip Main
"""

import argparse
import logging
import sys

import classloader


def format_packages(context):
    """Describe every registered package and its objects.

    Args:
        context: (LoaderContext) Loaded context

    Returns:
        (str) One line per package followed by one line per object
    """
    lines = []
    for name in sorted(context.registry.names()):
        package = context.get_package(name)
        lines.append(name or "<root>")
        for object_name, obj in package.public_members():
            line = f"  {object_name} <{obj.__kind__.value}>"
            if obj.__super__ is not None:
                line += f" extends {obj.__super__.__location__}"
            lines.append(line)
    return "\n".join(lines)


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="classloader",
        description="Load a tree of source files and run its entry point")
    parser.add_argument("directory",
        help="Base directory of the source tree")
    parser.add_argument("entry",
        help="Location of the entry point singleton, like game.Main")
    parser.add_argument("--extension", default=".py",
        help="Suffix of source files (default: .py)")
    parser.add_argument("--packages", action="store_true",
        help="Load the tree and show its packages instead of running Main")
    parser.add_argument("-v", "--verbose", action="store_true",
        help="Show debug logging for every package, file and import")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s")

    config = classloader.LoaderConfig(args.directory, args.entry, extension=args.extension)
    loader = classloader.Loader(config)
    try:
        if args.packages:
            loader.load()
            print(format_packages(loader.context))
            loader.close()
        else:
            loader.run()
    except classloader.LoaderError as err:
        print(f"error: {err}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

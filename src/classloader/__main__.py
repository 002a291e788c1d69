"""Run the class loader with `python -m classloader`."""

import sys

from classloader import cli


if __name__ == "__main__":
    sys.exit(cli.main())

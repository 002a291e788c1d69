"""
Class Loader

Runtime that loads a directory tree of Python source files as a hierarchy of
packages holding classes, singletons and enums, then runs an entry point.
"""

__version__ = "0.1.0"


from ._error import *
from ._naming import *
from ._location import *
from ._object import *
from ._enum import *
from ._scope import *
from ._package import *
from ._context import *
from ._import import *
from ._inherit import *
from ._builtin import *
from ._source import *
from ._loader import *

"""Shapedefs Structural Typing Utilities

Field classification for object shapes (nullable, optional, readonly,
writable, required) and a runtime guard that checks named fields are
defined on an instance.
"""

__version__ = "0.1.0"


from ._error import *
from ._value import *
from ._field import *
from ._shape import *
from ._classify import *
from ._guard import *
from ._introspect import *
from ._parse import *
from ._fmt import *

"""
Worm Program Interpreter

Parses and runs the small imperative programs that steer worms in a
turn-based artillery game. Programs run with a statement budget per turn and
resume where they stopped on the next turn.
"""

__version__ = "0.1.0"


from ._error import *
from ._value import *
from ._variable import *
from ._world import *
from . import ast
from ._program import *
from ._build import *
from ._parse import *
from ._sandbox import *

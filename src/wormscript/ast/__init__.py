"""AST nodes of worm programs."""

from ._base import *
from ._literal import *
from ._op import *
from ._entity import *
from ._ident import *
from ._stmt import *
from ._action import *
from ._flow import *

"""diagnav package root."""

__version__ = "0.1.0"

from diagnav.exceptions import DocumentOpenError, NeverRaise, NeverThrown
from diagnav.invariants import never
from diagnav.model import Direction, NavigationState
from diagnav.navigation import NavigationController

__all__ = [
    "__version__",
    "Direction",
    "DocumentOpenError",
    "NavigationController",
    "NavigationState",
    "NeverRaise",
    "NeverThrown",
    "never",
]

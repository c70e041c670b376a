"""
Automaton — Store for external/internal states and transitions.
"""

from doa.automaton.automaton import Automaton
from doa.automaton.errors import (
    AutomatonError,
    TransitionConflictError,
    AutomatonBorrowedError,
)

__all__ = [
    "Automaton",
    "AutomatonError",
    "TransitionConflictError",
    "AutomatonBorrowedError",
]

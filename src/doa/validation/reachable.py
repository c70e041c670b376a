"""
Reachable — States reachable from some initial state.
"""

from typing import TYPE_CHECKING, Any, Hashable

from doa.validation.base import Property
from doa.validation.graph import forward_closure
from doa.vocabulary import PropertyName

if TYPE_CHECKING:
    from doa.automaton import Automaton


def compute_reachable(automaton: "Automaton[Any, Any]") -> frozenset[Hashable]:
    """Forward closure of the initial states over the combined relation."""
    return forward_closure(automaton, automaton.initial_states)


class Reachable(Property[frozenset[Hashable]]):
    """Computes the set of states reachable from the initial states."""
    
    name = PropertyName.REACHABLE.value
    
    def validate(self, automaton: "Automaton[Any, Any]") -> frozenset[Hashable] | None:
        if automaton.is_empty():
            return None
        return compute_reachable(automaton)

"""
Productive — States that can still reach acceptance.

A state is productive when some finite sequence of transitions,
external or internal, leads from it to a final state. Final states are
productive through the empty path.
"""

from typing import TYPE_CHECKING, Any, Hashable

from doa.observability import get_logger
from doa.validation.base import Property
from doa.validation.graph import backward_closure
from doa.vocabulary import PropertyName

if TYPE_CHECKING:
    from doa.automaton import Automaton


logger = get_logger("validation.productive")


def compute_productive(automaton: "Automaton[Any, Any]") -> frozenset[Hashable]:
    """Backward closure of the final states over the combined relation."""
    return backward_closure(automaton, automaton.final_states)


class Productive(Property[frozenset[Hashable]]):
    """
    Computes the set of productive states.
    
    Usage:
        productive = automaton.validate(Productive)
    """
    
    name = PropertyName.PRODUCTIVE.value
    
    def validate(self, automaton: "Automaton[Any, Any]") -> frozenset[Hashable] | None:
        if automaton.is_empty():
            return None
        
        productive = compute_productive(automaton)
        logger.debug(
            "Productive states computed",
            extra={"extra_data": {
                "productive": len(productive),
                "final": len(automaton.final_states),
            }},
        )
        return productive

"""
Useful — States on some path from an initial to a final state.

A state is useful when it is reachable from an initial state and
productive. An automaton without initial states has no useful states;
that is an empty result, not a missing one.
"""

from typing import TYPE_CHECKING, Any, Hashable

from doa.observability import get_logger
from doa.validation.base import Property
from doa.validation.productive import compute_productive
from doa.validation.reachable import compute_reachable
from doa.vocabulary import PropertyName

if TYPE_CHECKING:
    from doa.automaton import Automaton


logger = get_logger("validation.useful")


class Useful(Property[frozenset[Hashable]]):
    """
    Computes the set of useful states.
    
    Usage:
        useful = automaton.validate(Useful)
    """
    
    name = PropertyName.USEFUL.value
    
    def validate(self, automaton: "Automaton[Any, Any]") -> frozenset[Hashable] | None:
        if automaton.is_empty():
            return None
        
        if not automaton.initial_states:
            logger.debug("No initial states; useful set is empty")
            return frozenset()
        
        reachable = compute_reachable(automaton)
        productive = compute_productive(automaton)
        useful = reachable & productive
        
        logger.debug(
            "Useful states computed",
            extra={"extra_data": {
                "reachable": len(reachable),
                "productive": len(productive),
                "useful": len(useful),
            }},
        )
        return useful

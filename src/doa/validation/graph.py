"""
Closures over the combined transition relation.

Both relations are collapsed to plain source -> destination edges;
labels play no part in reachability. Each state enters the worklist at
most once, so both closures run in O(states + edges) and terminate on
self-loops and cycles.
"""

from collections import deque
from typing import TYPE_CHECKING, Any, Hashable, Iterable, TypeVar

if TYPE_CHECKING:
    from doa.automaton import Automaton


S = TypeVar("S", bound=Hashable)


def forward_closure(automaton: "Automaton[Any, Any]", seeds: Iterable[S]) -> frozenset[S]:
    """States reachable from any seed (seeds included), breadth-first."""
    visited: set[S] = set(seeds)
    queue: deque[S] = deque(visited)
    
    while queue:
        state = queue.popleft()
        for successor in automaton.successors(state):
            if successor not in visited:
                visited.add(successor)
                queue.append(successor)
    
    return frozenset(visited)


def backward_closure(automaton: "Automaton[Any, Any]", targets: Iterable[S]) -> frozenset[S]:
    """
    States from which any target is reachable (targets included).
    
    Backward fixpoint: start from the targets and repeatedly add every
    predecessor of a newly added state until nothing new appears.
    """
    reverse = automaton.predecessors_map()
    reached: set[S] = set(targets)
    worklist: deque[S] = deque(reached)
    
    while worklist:
        state = worklist.popleft()
        for predecessor in reverse.get(state, ()):
            if predecessor not in reached:
                reached.add(predecessor)
                worklist.append(predecessor)
    
    return frozenset(reached)

"""
Automaton — State and transition storage.

Holds two classifications of state (external, internal), the initial
and final markers, and two transition relations:

- external: source -> label -> destination (deterministic by shape)
- internal: source -> label -> {destinations} (nondeterministic)

The store performs no well-formedness checks. Transition endpoints
that were never declared are implicit members of the state universe.
Properties are computed by handing the automaton to a Property via
validate().
"""

import time
from contextlib import contextmanager
from threading import Lock
from typing import Any, Generic, Hashable, Iterator, TypeVar

from doa.config import AutomatonConfig
from doa.vocabulary import ConflictPolicy, StateKind, TransitionKind
from doa.automaton.errors import AutomatonBorrowedError, TransitionConflictError
from doa.observability import RunContext, get_logger, get_metrics, get_run_id
from doa.validation.base import Property


logger = get_logger("automaton")

S = TypeVar("S", bound=Hashable)
T = TypeVar("T", bound=Hashable)
Out = TypeVar("Out")


class Automaton(Generic[S, T]):
    """
    Automaton with external/internal states and transitions.
    
    Built incrementally through the insert_* methods, then read by
    validators. Insertion while a validation is in flight raises
    AutomatonBorrowedError.
    
    Usage:
        automaton = Automaton()
        automaton.insert_initial_state("q0")
        automaton.insert_final_state("q1")
        automaton.insert_external_transition("q0", "a", "q1")
        automaton.validate(Useful)  # frozenset({"q0", "q1"})
    """
    
    def __init__(self, config: AutomatonConfig | None = None):
        self.config = config or AutomatonConfig()
        
        self.external_states: set[S] = set()
        self.internal_states: set[S] = set()
        self.initial_states: set[S] = set()
        self.final_states: set[S] = set()
        self.external_transitions: dict[S, dict[T, S]] = {}
        self.internal_transitions: dict[S, dict[T, set[S]]] = {}
        
        self._borrows = 0
        self._borrow_lock = Lock()
    
    # =========================================================================
    # STATE INSERTION
    # =========================================================================
    
    def insert_external_state(self, state: S) -> None:
        """Insert a new external state into the automaton."""
        with self._mutating():
            self.external_states.add(state)
    
    def insert_internal_state(self, state: S) -> None:
        """Insert a new internal state into the automaton."""
        with self._mutating():
            self.internal_states.add(state)
    
    def insert_initial_state(self, state: S) -> None:
        """Insert a new initial state into the automaton."""
        with self._mutating():
            self.initial_states.add(state)
    
    def insert_final_state(self, state: S) -> None:
        """Insert a new final state into the automaton."""
        with self._mutating():
            self.final_states.add(state)
    
    # =========================================================================
    # TRANSITION INSERTION
    # =========================================================================
    
    def insert_external_transition(self, source: S, label: T, destination: S) -> None:
        """
        Insert a new external transition into the automaton.
        
        At most one destination is kept per (source, label). A different
        destination for an existing pair is handled by the configured
        ConflictPolicy: overwritten under LAST_WRITE_WINS, rejected with
        TransitionConflictError under REJECT.
        
        Does not check that the states have been previously added.
        """
        with self._mutating():
            deltas = self.external_transitions.setdefault(source, {})

            if label in deltas and deltas[label] != destination:
                existing = deltas[label]
                if self.config.record_metrics:
                    get_metrics().transition_conflicts.inc()

                if self.config.conflict_policy == ConflictPolicy.REJECT:
                    raise TransitionConflictError(source, label, existing, destination)

                logger.debug(
                    "Overwriting external transition",
                    extra={"extra_data": {
                        "source": repr(source),
                        "label": repr(label),
                        "previous": repr(existing),
                        "destination": repr(destination),
                    }},
                )

            deltas[label] = destination
    
    def insert_internal_transition(self, source: S, label: T, destination: S) -> None:
        """
        Insert a new internal transition into the automaton.
        
        Destinations accumulate per (source, label); duplicates are absorbed.
        Does not check that the states have been previously added.
        """
        with self._mutating():
            deltas = self.internal_transitions.setdefault(source, {})
            deltas.setdefault(label, set()).add(destination)
    
    def insert_state(self, state: S, kind: StateKind) -> None:
        """Insert a state under the given classification."""
        if kind == StateKind.EXTERNAL:
            self.insert_external_state(state)
        else:
            self.insert_internal_state(state)

    def insert_transition(self, source: S, label: T, destination: S, kind: TransitionKind) -> None:
        """Insert a transition into the relation matching kind."""
        if kind == TransitionKind.EXTERNAL:
            self.insert_external_transition(source, label, destination)
        else:
            self.insert_internal_transition(source, label, destination)

    # =========================================================================
    # READ HELPERS
    # =========================================================================

    def kinds_of(self, state: S) -> frozenset[StateKind]:
        """Classification tags carried by state; empty when unclassified."""
        kinds = set()
        if state in self.external_states:
            kinds.add(StateKind.EXTERNAL)
        if state in self.internal_states:
            kinds.add(StateKind.INTERNAL)
        return frozenset(kinds)

    @property
    def declared_states(self) -> frozenset[S]:
        """States inserted through any of the state insertion methods."""
        return frozenset(
            self.external_states
            | self.internal_states
            | self.initial_states
            | self.final_states
        )
    
    @property
    def states(self) -> frozenset[S]:
        """Declared states plus every transition endpoint."""
        universe = set(self.declared_states)
        for source, destination in self.edges():
            universe.add(source)
            universe.add(destination)
        return frozenset(universe)
    
    def is_empty(self) -> bool:
        """True when no state appears anywhere in the automaton."""
        return not self.declared_states and not self.transition_count()
    
    def successors(self, state: S) -> set[S]:
        """Destinations of every transition leaving state, labels ignored."""
        result: set[S] = set(self.external_transitions.get(state, {}).values())
        for destinations in self.internal_transitions.get(state, {}).values():
            result |= destinations
        return result
    
    def edges(self) -> Iterator[tuple[S, S]]:
        """
        Yield (source, destination) pairs of the combined relation.
        
        Pairs reachable through several labels are yielded once per label.
        """
        for source, deltas in self.external_transitions.items():
            for destination in deltas.values():
                yield source, destination
        for source, deltas in self.internal_transitions.items():
            for destinations in deltas.values():
                for destination in destinations:
                    yield source, destination
    
    def predecessors_map(self) -> dict[S, set[S]]:
        """Reverse adjacency: destination -> sources with an edge into it."""
        reverse: dict[S, set[S]] = {}
        for source, destination in self.edges():
            reverse.setdefault(destination, set()).add(source)
        return reverse
    
    def transition_count(self) -> int:
        """Number of (source, label, destination) triples in both relations."""
        external = sum(len(deltas) for deltas in self.external_transitions.values())
        internal = sum(
            len(destinations)
            for deltas in self.internal_transitions.values()
            for destinations in deltas.values()
        )
        return external + internal
    
    def __len__(self) -> int:
        return len(self.states)
    
    def __contains__(self, state: object) -> bool:
        if (
            state in self.external_states
            or state in self.internal_states
            or state in self.initial_states
            or state in self.final_states
        ):
            return True
        return any(state in edge for edge in self.edges())
    
    def __repr__(self) -> str:
        return (
            f"Automaton(states={len(self)}, transitions={self.transition_count()}, "
            f"initial={len(self.initial_states)}, final={len(self.final_states)})"
        )
    
    # =========================================================================
    # VALIDATION
    # =========================================================================
    
    @contextmanager
    def borrow(self) -> Iterator["Automaton[S, T]"]:
        """
        Mark the automaton as read-only for the duration of the block.
        
        Borrows nest and may be held from several threads at once.
        """
        with self._borrow_lock:
            self._borrows += 1
        if self.config.record_metrics:
            get_metrics().active_validations.inc()
        try:
            yield self
        finally:
            with self._borrow_lock:
                self._borrows -= 1
            if self.config.record_metrics:
                get_metrics().active_validations.dec()
    
    @property
    def is_borrowed(self) -> bool:
        return self._borrows > 0
    
    def validate(self, prop: Property[Out] | type[Property[Out]]) -> Out | None:
        """
        Compute a property over this automaton.
        
        Args:
            prop: A Property instance, or a Property subclass that can be
                  instantiated without arguments
        
        Returns:
            The property's result, or None when there is nothing to compute
        """
        if isinstance(prop, type) and issubclass(prop, Property):
            prop = prop()
        if not isinstance(prop, Property):
            raise TypeError(f"Expected a Property, got {type(prop).__name__}")
        
        with RunContext(get_run_id()), self.borrow():
            started = time.perf_counter()
            result = prop.validate(self)
            elapsed = time.perf_counter() - started

            logger.debug(
                "Validated %s",
                prop.name,
                extra={"extra_data": {
                    "property": prop.name,
                    "empty": result is None,
                    "elapsed_seconds": round(elapsed, 6),
                }},
            )

        if self.config.record_metrics:
            self._record(result, elapsed)
        return result
    
    def _record(self, result: Any, elapsed: float) -> None:
        metrics = get_metrics()
        metrics.validations_total.inc()
        metrics.validation_duration_seconds.observe(elapsed)
        if result is None:
            metrics.validations_empty.inc()
        elif isinstance(result, (set, frozenset)):
            metrics.result_size.observe(len(result))
    
    @contextmanager
    def _mutating(self) -> Iterator[None]:
        # Check and mutation happen under the borrow lock, so a borrow
        # can never start between them.
        with self._borrow_lock:
            if self._borrows > 0:
                raise AutomatonBorrowedError(
                    "Automaton is being validated; insertions are not allowed until it returns"
                )
            yield

"""
Tests for the automaton store: insertion semantics, conflict policy,
read helpers and the borrow guard.
"""

import threading
import time

import pytest

from doa import (
    Automaton,
    AutomatonBorrowedError,
    AutomatonConfig,
    ConflictPolicy,
    Productive,
    Property,
    StateKind,
    TransitionConflictError,
    TransitionKind,
)
from doa.observability import get_metrics


class TestStateInsertion:
    """Tests for the four state insertion methods."""
    
    def test_each_set_receives_its_state(self):
        """Each insertion targets its own set."""
        automaton = Automaton()
        automaton.insert_external_state("e")
        automaton.insert_internal_state("i")
        automaton.insert_initial_state("s")
        automaton.insert_final_state("f")
        
        assert automaton.external_states == {"e"}
        assert automaton.internal_states == {"i"}
        assert automaton.initial_states == {"s"}
        assert automaton.final_states == {"f"}
    
    def test_duplicate_is_idempotent(self):
        """Inserting a state twice keeps one copy."""
        automaton = Automaton()
        automaton.insert_external_state("q0")
        automaton.insert_external_state("q0")
        assert automaton.external_states == {"q0"}
    
    def test_state_may_be_external_and_internal(self):
        """Classification tags are independent."""
        automaton = Automaton()
        automaton.insert_external_state("q0")
        automaton.insert_internal_state("q0")
        assert automaton.kinds_of("q0") == {StateKind.EXTERNAL, StateKind.INTERNAL}
    
    def test_unclassified_state_has_no_kinds(self):
        """Initial-only state carries no classification."""
        automaton = Automaton()
        automaton.insert_initial_state("q0")
        assert automaton.kinds_of("q0") == frozenset()
    
    def test_insert_state_by_kind(self):
        """insert_state dispatches on StateKind."""
        automaton = Automaton()
        automaton.insert_state("e", StateKind.EXTERNAL)
        automaton.insert_state("i", StateKind.INTERNAL)
        assert automaton.external_states == {"e"}
        assert automaton.internal_states == {"i"}
    
    def test_any_hashable_state(self):
        """States may be any hashable value."""
        automaton = Automaton()
        automaton.insert_external_state((1, "a"))
        automaton.insert_internal_state(frozenset({2}))
        assert (1, "a") in automaton
        assert frozenset({2}) in automaton


class TestExternalTransitions:
    """Tests for the deterministic relation."""
    
    def test_creates_nested_map(self):
        """First insertion for a source creates its label map."""
        automaton = Automaton()
        automaton.insert_external_transition("q0", "a", "q1")
        assert automaton.external_transitions == {"q0": {"a": "q1"}}
    
    def test_last_write_wins_by_default(self):
        """A second destination for (source, label) replaces the first."""
        automaton = Automaton()
        automaton.insert_external_transition("q0", "a", "q1")
        automaton.insert_external_transition("q0", "a", "q2")
        assert automaton.external_transitions == {"q0": {"a": "q2"}}
        assert get_metrics().transition_conflicts.value == 1
    
    def test_distinct_labels_coexist(self):
        """Different labels from the same source are kept."""
        automaton = Automaton()
        automaton.insert_external_transition("q0", "a", "q1")
        automaton.insert_external_transition("q0", "b", "q2")
        assert automaton.external_transitions == {"q0": {"a": "q1", "b": "q2"}}
    
    def test_reject_policy_raises(self):
        """REJECT refuses a conflicting destination and keeps the original."""
        automaton = Automaton(AutomatonConfig(conflict_policy=ConflictPolicy.REJECT))
        automaton.insert_external_transition("q0", "a", "q1")
        
        with pytest.raises(TransitionConflictError) as exc_info:
            automaton.insert_external_transition("q0", "a", "q2")
        
        err = exc_info.value
        assert (err.source, err.label, err.existing, err.attempted) == ("q0", "a", "q1", "q2")
        assert automaton.external_transitions == {"q0": {"a": "q1"}}
    
    def test_reject_policy_allows_identical_reinsert(self):
        """Re-inserting the same destination is not a conflict."""
        automaton = Automaton(AutomatonConfig(conflict_policy=ConflictPolicy.REJECT))
        automaton.insert_external_transition("q0", "a", "q1")
        automaton.insert_external_transition("q0", "a", "q1")
        assert automaton.external_transitions == {"q0": {"a": "q1"}}
        assert get_metrics().transition_conflicts.value == 0
    
    def test_conflict_not_counted_without_metrics(self):
        """record_metrics=False leaves the registry untouched."""
        automaton = Automaton(AutomatonConfig(record_metrics=False))
        automaton.insert_external_transition("q0", "a", "q1")
        automaton.insert_external_transition("q0", "a", "q2")
        assert get_metrics().transition_conflicts.value == 0


class TestInternalTransitions:
    """Tests for the nondeterministic relation."""
    
    def test_destinations_accumulate(self):
        """New destinations for (source, label) grow the set."""
        automaton = Automaton()
        automaton.insert_internal_transition("q1", "b", "q2")
        automaton.insert_internal_transition("q1", "b", "q0")
        assert automaton.internal_transitions == {"q1": {"b": {"q0", "q2"}}}
    
    def test_duplicate_triple_absorbed(self):
        """Inserting the same triple twice is a no-op."""
        automaton = Automaton()
        automaton.insert_internal_transition("q1", "b", "q2")
        automaton.insert_internal_transition("q1", "b", "q2")
        assert automaton.transition_count() == 1
    
    def test_insert_transition_by_kind(self):
        """insert_transition dispatches on TransitionKind."""
        automaton = Automaton()
        automaton.insert_transition("q0", "a", "q1", TransitionKind.EXTERNAL)
        automaton.insert_transition("q0", "a", "q2", TransitionKind.INTERNAL)
        assert automaton.external_transitions == {"q0": {"a": "q1"}}
        assert automaton.internal_transitions == {"q0": {"a": {"q2"}}}


class TestReadHelpers:
    """Tests for the derived views used by validators."""
    
    def test_states_include_transition_endpoints(self):
        """Undeclared endpoints are implicit states."""
        automaton = Automaton()
        automaton.insert_external_state("q0")
        automaton.insert_internal_transition("x", "t", "y")
        assert automaton.states == {"q0", "x", "y"}
        assert automaton.declared_states == {"q0"}
        assert len(automaton) == 3
    
    def test_is_empty(self):
        """Empty means no states and no transitions."""
        automaton = Automaton()
        assert automaton.is_empty()
        automaton.insert_external_transition("x", "t", "y")
        assert not automaton.is_empty()
    
    def test_final_only_is_not_empty(self):
        """A state in any set makes the automaton non-empty."""
        automaton = Automaton()
        automaton.insert_final_state("f")
        assert not automaton.is_empty()
    
    def test_successors_merge_both_relations(self, scenario_a):
        """Successors ignore labels and relation kind."""
        scenario_a.insert_external_transition("q1", "z", "q3")
        assert scenario_a.successors("q1") == {"q0", "q2", "q3"}
        assert scenario_a.successors("q2") == set()
    
    def test_predecessors_map(self, scenario_a):
        """Reverse adjacency covers every edge."""
        reverse = scenario_a.predecessors_map()
        assert reverse["q2"] == {"q1", "q3"}
        assert reverse["q1"] == {"q0"}
        assert reverse["q0"] == {"q1"}
        assert "q3" not in reverse
    
    def test_transition_count(self, scenario_a):
        """Counts (source, label, destination) triples."""
        assert scenario_a.transition_count() == 4
    
    def test_repr(self, scenario_a):
        """repr summarizes sizes."""
        assert repr(scenario_a) == "Automaton(states=4, transitions=4, initial=1, final=1)"


class TestValidateDispatch:
    """Tests for Automaton.validate."""
    
    def test_accepts_class_or_instance(self, scenario_a):
        """A Property subclass is instantiated on demand."""
        assert scenario_a.validate(Productive) == scenario_a.validate(Productive())
    
    def test_rejects_non_property(self, scenario_a):
        """Anything but a Property raises TypeError."""
        with pytest.raises(TypeError):
            scenario_a.validate(object())
        with pytest.raises(TypeError):
            scenario_a.validate(int)
    
    def test_custom_property_result_type(self, scenario_a):
        """Properties choose their own result type."""
        class StateCount(Property[int]):
            name = "state_count"
            
            def validate(self, automaton):
                return len(automaton) or None
        
        assert scenario_a.validate(StateCount) == 4
        assert Automaton().validate(StateCount) is None
    
    def test_incomplete_property_cannot_be_instantiated(self):
        """A subclass without validate() is abstract."""
        class Incomplete(Property[int]):
            pass
        
        with pytest.raises(TypeError):
            Incomplete()
    
    def test_does_not_mutate(self, scenario_a):
        """Validation leaves the store unchanged."""
        before = (
            set(scenario_a.states),
            {k: dict(v) for k, v in scenario_a.external_transitions.items()},
            {k: {lk: set(lv) for lk, lv in v.items()} for k, v in scenario_a.internal_transitions.items()},
        )
        scenario_a.validate(Productive)
        after = (
            set(scenario_a.states),
            {k: dict(v) for k, v in scenario_a.external_transitions.items()},
            {k: {lk: set(lv) for lk, lv in v.items()} for k, v in scenario_a.internal_transitions.items()},
        )
        assert before == after


class TestBorrowGuard:
    """Insertion is refused while a validation reads the automaton."""
    
    def test_insert_during_validation_raises(self, scenario_a):
        """A property that mutates its input is stopped."""
        class Mutating(Property[int]):
            def validate(self, automaton):
                automaton.insert_final_state("q9")
                return 0
        
        with pytest.raises(AutomatonBorrowedError):
            scenario_a.validate(Mutating)
        
        assert "q9" not in scenario_a.final_states
        assert not scenario_a.is_borrowed
    
    def test_borrow_released_after_validation(self, scenario_a):
        """Insertion works again once validate returns."""
        scenario_a.validate(Productive)
        scenario_a.insert_final_state("q3")
        assert "q3" in scenario_a.final_states
    
    def test_explicit_borrow_nests(self, scenario_a):
        """borrow() can be held around validations."""
        with scenario_a.borrow():
            assert scenario_a.is_borrowed
            scenario_a.validate(Productive)
            assert scenario_a.is_borrowed
            with pytest.raises(AutomatonBorrowedError):
                scenario_a.insert_external_state("q5")
        assert not scenario_a.is_borrowed
    
    def test_active_validations_gauge(self, scenario_a):
        """The gauge counts in-flight validations."""
        seen = []
        
        class Probe(Property[float]):
            def validate(self, automaton):
                seen.append(get_metrics().active_validations.value)
                return 0.0
        
        scenario_a.validate(Probe)
        assert seen == [1]
        assert get_metrics().active_validations.value == 0


class _SlowHash:
    """State whose hashing takes long enough to overlap with a validation."""
    
    def __init__(self, hashing: threading.Event, delay: float):
        self._hashing = hashing
        self._delay = delay
    
    def __hash__(self):
        self._hashing.set()
        time.sleep(self._delay)
        return id(self)


class TestConcurrentMutation:
    """Insertion and validation from different threads serialize."""
    
    def test_validation_waits_for_insertion_in_progress(self):
        """A validation never observes an insertion half-way through."""
        automaton = Automaton()
        automaton.insert_external_state("q0")
        hashing = threading.Event()
        errors = []
        seen = {}
        
        def insert():
            try:
                automaton.insert_external_state(_SlowHash(hashing, delay=0.3))
            except Exception as exc:
                errors.append(exc)
        
        class Snapshot(Property[int]):
            def validate(self, automaton):
                seen["before"] = len(automaton.external_states)
                time.sleep(0.1)
                seen["after"] = len(automaton.external_states)
                return seen["after"]
        
        writer = threading.Thread(target=insert)
        writer.start()
        assert hashing.wait(timeout=5)
        
        automaton.validate(Snapshot)
        writer.join()
        
        assert errors == []
        assert seen == {"before": 2, "after": 2}
    
    def test_insertion_from_other_thread_during_borrow_raises(self):
        """A borrow held by one thread blocks insertions from another."""
        automaton = Automaton()
        errors = []
        
        def insert():
            try:
                automaton.insert_internal_transition("a", "x", "b")
            except AutomatonBorrowedError as exc:
                errors.append(exc)
        
        with automaton.borrow():
            writer = threading.Thread(target=insert)
            writer.start()
            writer.join()
        
        assert len(errors) == 1
        assert automaton.internal_transitions == {}


class TestMembership:
    """Membership covers declared states and transition endpoints."""
    
    def test_declared_state(self):
        """Any of the four sets counts."""
        automaton = Automaton()
        automaton.insert_final_state("f")
        assert "f" in automaton
    
    def test_endpoint_only_state(self):
        """Implicit states found through the edges."""
        automaton = Automaton()
        automaton.insert_external_transition("a", "x", "b")
        automaton.insert_internal_transition("c", "y", "d")
        assert "b" in automaton
        assert "c" in automaton
    
    def test_missing_state(self):
        """Labels and unknown values are not states."""
        automaton = Automaton()
        automaton.insert_external_transition("a", "x", "b")
        assert "x" not in automaton
        assert "z" not in automaton

"""
Shared fixtures: small automata used across the test suite.
"""

import logging

import pytest

from doa import Automaton
from doa.observability import reset_metrics
from doa.observability.logging import ROOT_LOGGER


@pytest.fixture(autouse=True)
def clean_metrics():
    """Every test starts from an empty metrics registry."""
    reset_metrics()
    yield
    reset_metrics()


@pytest.fixture
def restore_logging():
    """Undo configure_logging() after a test."""
    yield
    root = logging.getLogger(ROOT_LOGGER)
    root.handlers.clear()
    root.setLevel(logging.NOTSET)
    root.propagate = True


@pytest.fixture
def empty_automaton() -> Automaton:
    return Automaton()


@pytest.fixture
def scenario_a() -> Automaton:
    """
    q0 --a--> q1 (external), q1 --b--> {q2, q0} (internal),
    q3 --c--> {q2} (internal). q3 is not reachable from q0.
    """
    automaton = Automaton()
    for state in ("q0", "q1", "q2", "q3"):
        automaton.insert_external_state(state)
    automaton.insert_initial_state("q0")
    automaton.insert_final_state("q2")
    automaton.insert_external_transition("q0", "a", "q1")
    automaton.insert_internal_transition("q1", "b", "q2")
    automaton.insert_internal_transition("q1", "b", "q0")
    automaton.insert_internal_transition("q3", "c", "q2")
    return automaton


@pytest.fixture
def scenario_b() -> Automaton:
    """Single state that is both initial and final, no transitions."""
    automaton = Automaton()
    automaton.insert_external_state("q0")
    automaton.insert_initial_state("q0")
    automaton.insert_final_state("q0")
    return automaton

"""
Vocabulary enums — the shared language of the automaton model.

All enumerated types referenced by the store, the configuration,
and the property validators.
"""

from enum import Enum


# =============================================================================
# STATES AND TRANSITIONS
# =============================================================================

class StateKind(str, Enum):
    """
    Classification tag of a state.

    Tags are independent: a state may carry both, or neither.
    """
    EXTERNAL = "EXTERNAL"    # Interacts with the environment
    INTERNAL = "INTERNAL"    # Private to the component


class TransitionKind(str, Enum):
    """Category of a labeled edge."""
    EXTERNAL = "EXTERNAL"    # At most one destination per (source, label)
    INTERNAL = "INTERNAL"    # Any number of destinations per (source, label)


class ConflictPolicy(str, Enum):
    """
    What happens when an external transition is re-inserted for an
    existing (source, label) pair with a different destination.
    """
    LAST_WRITE_WINS = "LAST_WRITE_WINS"  # Overwrite the previous destination
    REJECT = "REJECT"                    # Raise TransitionConflictError


# =============================================================================
# PROPERTIES
# =============================================================================

class PropertyName(str, Enum):
    """Names of the built-in property validators."""
    PRODUCTIVE = "productive"
    USEFUL = "useful"
    REACHABLE = "reachable"
    STRUCTURE = "structure"


class IssueCode(str, Enum):
    """
    Finding codes reported by the structure validator.

    None of these are fatal; strict mode reports them as errors.
    """
    UNDECLARED_STATE = "UNDECLARED_STATE"          # Transition endpoint never declared
    UNCLASSIFIED_INITIAL = "UNCLASSIFIED_INITIAL"  # Initial state neither external nor internal
    UNCLASSIFIED_FINAL = "UNCLASSIFIED_FINAL"      # Final state neither external nor internal
    DUAL_CLASSIFIED = "DUAL_CLASSIFIED"            # Both external and internal
    NO_INITIAL_STATES = "NO_INITIAL_STATES"
    NO_FINAL_STATES = "NO_FINAL_STATES"

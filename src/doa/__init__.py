"""
doa — Automata with external and internal states and transitions,
and property validators over them.
"""

__version__ = "0.1.0"

from doa.vocabulary import ConflictPolicy, IssueCode, PropertyName, StateKind, TransitionKind
from doa.config import AutomatonConfig, load_config_from_env
from doa.automaton import (
    Automaton,
    AutomatonError,
    AutomatonBorrowedError,
    TransitionConflictError,
)
from doa.validation import (
    Property,
    Productive,
    Reachable,
    Useful,
    Structure,
    StructuralIssue,
    ValidationResult,
)
from doa.observability import configure_logging, get_logger, get_metrics, reset_metrics

__all__ = [
    "__version__",
    # Vocabulary
    "ConflictPolicy",
    "IssueCode",
    "PropertyName",
    "StateKind",
    "TransitionKind",
    # Config
    "AutomatonConfig",
    "load_config_from_env",
    # Store
    "Automaton",
    "AutomatonError",
    "AutomatonBorrowedError",
    "TransitionConflictError",
    # Validation
    "Property",
    "Productive",
    "Reachable",
    "Useful",
    "Structure",
    "StructuralIssue",
    "ValidationResult",
    # Observability
    "configure_logging",
    "get_logger",
    "get_metrics",
    "reset_metrics",
]

"""
Vocabulary — Enumerated types shared by the store and the validators.
"""

from doa.vocabulary.enums import (
    # Model
    StateKind,
    TransitionKind,
    ConflictPolicy,
    # Validation
    PropertyName,
    IssueCode,
)

__all__ = [
    # Model
    "StateKind",
    "TransitionKind",
    "ConflictPolicy",
    # Validation
    "PropertyName",
    "IssueCode",
]

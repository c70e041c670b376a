"""
Store errors.

Only misuse of the store raises. Malformed automata never do: the
validators degrade to smaller or empty results instead.
"""

from typing import Any


class AutomatonError(Exception):
    """Base class for errors raised by the automaton store."""


class TransitionConflictError(AutomatonError):
    """
    An external transition was re-inserted for an existing (source, label)
    pair with a different destination under ConflictPolicy.REJECT.
    """
    
    def __init__(self, source: Any, label: Any, existing: Any, attempted: Any):
        self.source = source
        self.label = label
        self.existing = existing
        self.attempted = attempted
        super().__init__(
            f"External transition {source!r} --{label!r}--> already targets "
            f"{existing!r}; refusing {attempted!r}"
        )


class AutomatonBorrowedError(AutomatonError):
    """An insertion was attempted while a validation was reading the automaton."""

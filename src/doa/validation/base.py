"""
Property — The validator interface.

A property is any computation over an automaton that yields a result
of its own type. The automaton stays agnostic of which properties
exist: new ones are added by subclassing Property, never by changing
the store.

Result convention:
- None: nothing to compute (the automaton has no states at all)
- any other value: a computed result, possibly empty
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar

if TYPE_CHECKING:
    from doa.automaton import Automaton


Out = TypeVar("Out")


class Property(ABC, Generic[Out]):
    """
    Base class for property validators.
    
    Subclasses must implement validate(); there is no default
    computation, so an incomplete subclass cannot be instantiated.
    Implementations read the automaton and must not mutate it or keep
    state between calls.
    """
    
    name: ClassVar[str] = "property"
    
    @abstractmethod
    def validate(self, automaton: "Automaton[Any, Any]") -> Out | None:
        """Compute the property, or return None when there is nothing to compute."""
    
    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

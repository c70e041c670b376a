"""
Structure — Non-fatal well-formedness report.

The store accepts any insertion order and never checks references.
This validator reports what a careful reader would flag:
- Transition endpoints never inserted as states
- Initial or final states that carry no classification
- States classified both external and internal
- Missing initial or final states

Findings are warnings by default and errors in strict mode. Nothing
here raises for a malformed automaton.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Hashable

from doa.validation.base import Property
from doa.vocabulary import IssueCode, PropertyName

if TYPE_CHECKING:
    from doa.automaton import Automaton


@dataclass(frozen=True)
class StructuralIssue:
    """Single structural finding."""
    code: IssueCode
    state: Hashable | None
    message: str


@dataclass
class ValidationResult:
    """Result of a structural check."""
    valid: bool
    errors: list[StructuralIssue] = field(default_factory=list)
    warnings: list[StructuralIssue] = field(default_factory=list)
    
    @classmethod
    def success(cls, warnings: list[StructuralIssue] | None = None) -> "ValidationResult":
        return cls(valid=True, errors=[], warnings=warnings or [])
    
    @classmethod
    def failure(
        cls,
        errors: list[StructuralIssue],
        warnings: list[StructuralIssue] | None = None,
    ) -> "ValidationResult":
        return cls(valid=False, errors=errors, warnings=warnings or [])
    
    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Combine two results."""
        return ValidationResult(
            valid=self.valid and other.valid,
            errors=self.errors + other.errors,
            warnings=self.warnings + other.warnings,
        )
    
    def codes(self) -> set[IssueCode]:
        """Codes of every finding, errors and warnings alike."""
        return {issue.code for issue in self.errors + self.warnings}


class Structure(Property[ValidationResult]):
    """
    Reports structural findings over an automaton.
    
    Args:
        strict: Report findings as errors. None defers to the
                automaton's config.
    """
    
    name = PropertyName.STRUCTURE.value
    
    def __init__(self, strict: bool | None = None):
        self.strict = strict
    
    def validate(self, automaton: "Automaton[Any, Any]") -> ValidationResult | None:
        if automaton.is_empty():
            return None
        
        findings: list[StructuralIssue] = []
        findings.extend(self._check_undeclared(automaton))
        findings.extend(self._check_classification(automaton))
        findings.extend(self._check_markers(automaton))
        
        strict = automaton.config.strict if self.strict is None else self.strict
        if strict and findings:
            return ValidationResult.failure(findings)
        return ValidationResult.success(findings)
    
    def _check_undeclared(self, automaton: "Automaton[Any, Any]") -> list[StructuralIssue]:
        """Transition endpoints never inserted through a state insertion method."""
        declared = automaton.declared_states
        endpoints: set[Hashable] = set()
        for source, destination in automaton.edges():
            endpoints.add(source)
            endpoints.add(destination)
        
        return [
            StructuralIssue(
                code=IssueCode.UNDECLARED_STATE,
                state=state,
                message=f"State {state!r} appears in a transition but was never declared",
            )
            for state in _ordered(endpoints - declared)
        ]
    
    def _check_classification(self, automaton: "Automaton[Any, Any]") -> list[StructuralIssue]:
        """Unclassified initial/final states and dual classification."""
        issues = []
        classified = automaton.external_states | automaton.internal_states
        
        for state in _ordered(automaton.initial_states - classified):
            issues.append(StructuralIssue(
                code=IssueCode.UNCLASSIFIED_INITIAL,
                state=state,
                message=f"Initial state {state!r} is neither external nor internal",
            ))
        
        for state in _ordered(automaton.final_states - classified):
            issues.append(StructuralIssue(
                code=IssueCode.UNCLASSIFIED_FINAL,
                state=state,
                message=f"Final state {state!r} is neither external nor internal",
            ))
        
        for state in _ordered(automaton.external_states & automaton.internal_states):
            issues.append(StructuralIssue(
                code=IssueCode.DUAL_CLASSIFIED,
                state=state,
                message=f"State {state!r} is both external and internal",
            ))
        
        return issues
    
    def _check_markers(self, automaton: "Automaton[Any, Any]") -> list[StructuralIssue]:
        issues = []
        if not automaton.initial_states:
            issues.append(StructuralIssue(
                code=IssueCode.NO_INITIAL_STATES,
                state=None,
                message="Automaton has no initial states; no state is useful",
            ))
        if not automaton.final_states:
            issues.append(StructuralIssue(
                code=IssueCode.NO_FINAL_STATES,
                state=None,
                message="Automaton has no final states; no state is productive",
            ))
        return issues


def _ordered(states: set[Hashable]) -> list[Hashable]:
    # Stable report order without requiring states to be comparable
    return sorted(states, key=repr)

"""
Validation — Property validators over automata.

- Productive: states that can reach a final state
- Reachable: states reachable from an initial state
- Useful: states on some initial-to-final path
- Structure: non-fatal well-formedness report
"""

from doa.validation.base import Property
from doa.validation.graph import forward_closure, backward_closure
from doa.validation.productive import Productive, compute_productive
from doa.validation.reachable import Reachable, compute_reachable
from doa.validation.useful import Useful
from doa.validation.structure import (
    Structure,
    StructuralIssue,
    ValidationResult,
)

__all__ = [
    # Interface
    "Property",
    # Graph closures
    "forward_closure",
    "backward_closure",
    # Properties
    "Productive",
    "compute_productive",
    "Reachable",
    "compute_reachable",
    "Useful",
    "Structure",
    "StructuralIssue",
    "ValidationResult",
]

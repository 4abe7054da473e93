"""
Generic result container for pygaussbayes computations.

The Result class is the envelope that solve() returns its payload in, so
timing, method metadata and non-fatal warnings travel with the numbers
regardless of which solve method produced them.

Design decisions:
    - Generic over parameter payload P for type safety
    - info dict for flexible metadata (method, dimensions, diagnostics)
    - timing is optional (don't burden unit tests)
    - Immutable (frozen=True) for reproducibility
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for Bayes net computations.

    Type Parameters:
        P: The parameter payload type

    Attributes:
        params: The computed payload (solution values, log-determinant, ...)
        info: Structured metadata (method, number of conditionals, dimension)
        timing: Execution timing breakdown, or None if not measured
        method: Identifier of the solve method that produced this result
        warnings: Non-fatal issues encountered during computation

    Examples:
        >>> Result(
        ...     params=SolveParams(values=x, log_determinant=0.7, error=0.0),
        ...     info={'n_conditionals': 2, 'dim': 2},
        ...     timing={'total_seconds': 0.001},
        ...     method='back_substitution'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    method: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)

"""
Bayes net solution types.

Contains the parameter payload and user-facing solution wrapper.
"""

from dataclasses import dataclass
from typing import Any, Hashable, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray

from pygaussbayes.core.result import Result
from pygaussbayes.linear.vector_values import VectorValues

if TYPE_CHECKING:
    from pygaussbayes.linear.bayes_net import GaussianBayesNet


@dataclass(frozen=True)
class SolveParams:
    """
    Parameter payload for a Bayes net solve.

    This is the immutable data computed by solve().
    """
    values: VectorValues
    log_determinant: float
    error: float


@dataclass
class BayesNetSolution:
    """
    User-facing solve results.

    Wraps the Result envelope and provides convenient accessors for
    the solution, its objective value and the net's log-determinant.
    """
    _result: Result[SolveParams]
    _bayes_net: 'GaussianBayesNet'

    @property
    def values(self) -> VectorValues:
        return self._result.params.values

    @property
    def log_determinant(self) -> float:
        return self._result.params.log_determinant

    @property
    def determinant(self) -> float:
        return float(np.exp(self.log_determinant))

    @property
    def error(self) -> float:
        """0.5 |A x - b|^2 at the solution."""
        return self._result.params.error

    @property
    def method(self) -> str:
        return self._result.method

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    @property
    def bayes_net(self) -> 'GaussianBayesNet':
        return self._bayes_net

    def __getitem__(self, key: Hashable) -> NDArray[np.floating[Any]]:
        return self.values[key]

    def vector(self) -> NDArray[np.floating[Any]]:
        """Solution stacked in the net's elimination order."""
        return self.values.vector(self._bayes_net.ordering())

    def summary(self) -> str:
        """Plain-text summary of the solve."""
        lines = []
        lines.append("")
        lines.append("Gaussian Bayes net solve")
        lines.append("=" * 40)
        lines.append(f"Method:           {self.method}")
        lines.append(f"Conditionals:     {self.info['n_conditionals']}")
        lines.append(f"Dimension:        {self.info['dim']}")
        lines.append(f"Log-determinant:  {self.log_determinant:.6g}")
        lines.append(f"Error:            {self.error:.6g}")
        lines.append("")
        lines.append(f"{'Variable':<16}{'Value'}")
        lines.append("-" * 40)
        for key, value in self.values.items():
            formatted = ", ".join(f"{v:.6g}" for v in value)
            lines.append(f"{str(key):<16}[{formatted}]")
        if self.timing is not None:
            lines.append("")
            lines.append(f"Total time: {self.timing['total_seconds']:.4f}s")
        for warning in self.warnings:
            lines.append(f"Warning: {warning}")
        lines.append("")
        return "\n".join(lines)

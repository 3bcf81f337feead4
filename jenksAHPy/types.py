from __future__ import annotations
import json
from typing import Any, Dict, List, Optional, Tuple
import numpy as np

from .config import configure_parameters


class ClassScore:
    """
    The count-weighted mean class index of one factor.

    ``S`` is 0 when ``total`` is 0, i.e. the factor carries no information.
    """
    def __init__(self, name: str, S: float, total: float):
        self.name = name
        self.S = float(S)
        self.total = float(total)

    def __repr__(self) -> str:
        return f"ClassScore(name='{self.name}', S={self.S:.4f}, total={self.total:g})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ClassScore):
            return NotImplemented
        return (self.name, self.S, self.total) == (other.name, other.S, other.total)

    @property
    def has_information(self) -> bool:
        return self.total > 0

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "S": self.S, "total": self.total}


class AHPResult:
    """
    Everything derived from one set of factor tables: class scores, the
    Saaty comparison matrix, the priority weights and the consistency figures.

    Instances are plain value objects; recompute them whenever the input
    tables change.
    """
    def __init__(
        self,
        names: List[str],
        scores: List[ClassScore],
        matrix: np.ndarray,
        weights: np.ndarray,
        lambda_max: float,
        ci: float,
        cr: float,
        ri: float,
        iterations: int = 0,
        converged: bool = True
    ):
        self.names = list(names)
        self.scores = list(scores)
        self.matrix = matrix
        self.weights = weights
        self.lambda_max = float(lambda_max)
        self.ci = float(ci)
        self.cr = float(cr)
        self.ri = float(ri)
        self.iterations = iterations
        self.converged = converged

    def __repr__(self) -> str:
        weights_str = ", ".join(f"{w:.4f}" for w in self.weights)
        return (f"AHPResult(n={self.n}, weights=[{weights_str}], "
                f"lambda_max={self.lambda_max:.4f}, CI={self.ci:.4f}, CR={self.cr:.4f})")

    @property
    def n(self) -> int:
        return len(self.names)

    @property
    def zero_total_factors(self) -> List[str]:
        """Names of the factors whose class counts are all zero or missing."""
        return [s.name for s in self.scores if not s.has_information]

    def is_acceptable(self, threshold: Optional[float] = None) -> bool:
        """
        Checks the consistency ratio against an acceptance threshold.

        Args:
            threshold (optional): Maximum acceptable CR. Defaults to
                ``configure_parameters.DEFAULT_CR_THRESHOLD`` (0.10).
        """
        limit = threshold if threshold is not None else configure_parameters.DEFAULT_CR_THRESHOLD
        return self.cr <= limit

    def status_message(self, threshold: Optional[float] = None) -> str:
        limit = threshold if threshold is not None else configure_parameters.DEFAULT_CR_THRESHOLD
        if self.is_acceptable(limit):
            return f"Acceptable consistency (CR <= {limit:.2f})"
        return "Low consistency (review comparisons)"

    def ranking(self) -> List[Tuple[str, float]]:
        """Returns (factor_name, weight) pairs, heaviest first."""
        pairs = [(name, float(w)) for name, w in zip(self.names, self.weights)]
        pairs.sort(key=lambda x: x[1], reverse=True)
        return pairs

    def to_dict(self) -> Dict[str, Any]:
        """Serializes the result to a JSON-compatible dictionary."""
        return {
            "names": self.names,
            "scores": [s.to_dict() for s in self.scores],
            "matrix": np.asarray(self.matrix, dtype=float).tolist(),
            "weights": [float(w) for w in self.weights],
            "lambda_max": self.lambda_max,
            "CI": self.ci,
            "CR": self.cr,
            "RI": self.ri,
            "iterations": self.iterations,
            "converged": self.converged,
            "zero_total_factors": self.zero_total_factors,
        }

    def to_json(self, **kwargs) -> str:
        return json.dumps(self.to_dict(), **kwargs)

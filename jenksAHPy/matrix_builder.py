from __future__ import annotations
import math
from typing import List, Sequence, Union
import numpy as np

from .config import SAATY_THRESHOLDS, SAATY_VALUES
from .types import ClassScore

# ==============================================================================
# 1. RATIO TO SAATY SCALE
# ==============================================================================

class SaatyScale:
    """
    Maps the ratio of two class scores onto the discrete Saaty scale
    {1/9, 1/7, 1/5, 1/3, 1, 3, 5, 7, 9}.
    """
    @staticmethod
    def available_values() -> List[float]:
        """Returns the admissible comparison values, smallest first."""
        return list(SAATY_VALUES)

    @staticmethod
    def _bracket(r: float) -> float:
        """Saaty value for a ratio r >= 1 using the closed-open brackets."""
        for upper, value in SAATY_THRESHOLDS:
            if r < upper:
                return value
        return SAATY_THRESHOLDS[-1][1]

    @staticmethod
    def map_ratio(r: float) -> float:
        """
        Converts a score ratio into a Saaty comparison value.

        Brackets for r >= 1: [1, 1.25) -> 1, [1.25, 2.5) -> 3, [2.5, 4.5) -> 5,
        [4.5, 6.5) -> 7, [6.5, inf) -> 9. A ratio below 1 is mapped through its
        inverse and the result inverted, so map_ratio(r) == 1 / map_ratio(1 / r).

        A non-finite or non-positive ratio carries no information and maps to 1.

        Args:
            r: The ratio S_i / S_j.

        Returns:
            One of the nine Saaty values.
        """
        try:
            r = float(r)
        except (TypeError, ValueError):
            return 1.0
        if not math.isfinite(r) or r <= 0:
            return 1.0
        if r < 1:
            return 1.0 / SaatyScale._bracket(1.0 / r)
        return SaatyScale._bracket(r)

    @staticmethod
    def is_saaty_value(value: float, tolerance: float = 1e-9) -> bool:
        return any(abs(value - s) <= tolerance for s in SAATY_VALUES)


# ==============================================================================
# 2. MATRIX CREATION
# ==============================================================================

def create_comparison_matrix(size: int) -> np.ndarray:
    """
    Creates an (n x n) pairwise comparison matrix initialised to 1, which is
    the "equal importance" judgment and the required diagonal.
    """
    return np.ones((size, size), dtype=float)


def pair_judgment(s_i: float, s_j: float) -> float:
    """
    The Saaty value of factor i over factor j given their class scores.

    Rules, in order:
    1. both scores <= 0: no information on either side, so 1.
    2. S_j == 0: i is judged maximally preferable, so 9.
    3. S_i == 0: the mirror of rule 2, so 1/9.
    4. otherwise the mapped ratio S_i / S_j.
    """
    if s_i <= 0 and s_j <= 0:
        return 1.0
    if s_j == 0:
        return 9.0
    if s_i == 0:
        return 1.0 / 9.0
    return SaatyScale.map_ratio(s_i / s_j)


def build_comparison_matrix(scores: Sequence[Union[float, ClassScore]]) -> np.ndarray:
    """
    Builds the reciprocal Saaty comparison matrix from per-factor class scores.

    Only the upper triangle is evaluated; each pair is mapped once and the
    lower cell receives the exact inverse, so A[i, j] * A[j, i] == 1 holds
    by construction.

    Args:
        scores: One class score per factor (floats or ClassScore objects).

    Returns:
        A float NumPy array of shape (n, n).
    """
    values = [s.S if isinstance(s, ClassScore) else float(s) for s in scores]
    n = len(values)
    matrix = create_comparison_matrix(n)

    for i in range(n):
        for j in range(i + 1, n):
            s = pair_judgment(values[i], values[j])
            matrix[i, j] = s
            matrix[j, i] = 1.0 / s

    return matrix

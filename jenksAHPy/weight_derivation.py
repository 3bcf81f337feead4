from __future__ import annotations
from typing import Any, Dict
import numpy as np

from .config import MAX_ITER, TOLERANCE


def power_iteration(matrix: np.ndarray, max_iter: int = MAX_ITER, tol: float = TOLERANCE) -> Dict[str, Any]:
    """
    Estimates the principal eigenvector and eigenvalue of a comparison matrix
    by power iteration.

    .. note::
        This is not a general eigen-decomposition. It relies on the matrix
        being a positive reciprocal matrix, which guarantees a dominant real
        eigenvalue (Perron-Frobenius). Convergence is best effort: if the
        tolerance is not met within ``max_iter`` steps the last iterate is
        returned with ``converged`` set to False.

    Each step computes w = A v, rescales it to unit L1 norm and estimates the
    eigenvalue with the Rayleigh quotient (v' A v) / (v' v). Iteration stops
    once the largest component change drops below ``tol``, or immediately if
    A v is the zero vector.

    Args:
        matrix: A square (n x n) comparison matrix.
        max_iter: Maximum number of iterations.
        tol: Convergence tolerance on max |v_new - v|.

    Returns:
        A dictionary containing ``weights`` (summing to 1), ``lambda_max``,
        ``iterations`` and ``converged``.
    """
    A = np.asarray(matrix, dtype=float)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise ValueError(f"Power iteration requires a square 2D matrix, got shape {A.shape}.")

    n = A.shape[0]
    if n == 0:
        return {"weights": np.zeros(0), "lambda_max": 0.0, "iterations": 0, "converged": True}

    v = np.full(n, 1.0 / n)
    lambda_max = 0.0
    converged = False
    iterations = 0

    for _ in range(max_iter):
        w = A @ v
        norm = np.sum(np.abs(w))
        if norm == 0:
            break
        iterations += 1
        v_new = w / norm

        # Rayleigh quotient
        den = v_new @ v_new
        lambda_new = float((v_new @ (A @ v_new)) / den) if den != 0 else 0.0

        delta = np.max(np.abs(v_new - v))
        v = v_new
        lambda_max = lambda_new
        if delta < tol:
            converged = True
            break

    # Signed sum, not absolute
    total = np.sum(v)
    weights = v / total if total != 0 else v

    return {
        "weights": weights,
        "lambda_max": lambda_max,
        "iterations": iterations,
        "converged": converged
    }

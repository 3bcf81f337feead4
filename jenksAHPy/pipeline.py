"""
The end-to-end weighting pipeline.

    class tables -> class scores -> Saaty matrix -> power iteration -> CI / CR

``recompute`` is a pure function of its input: call it again whenever the
tables change and memoise on the caller's side if needed.
"""
from __future__ import annotations
import warnings
from typing import Any, Sequence, Union

from .config import MAX_ITER, TOLERANCE
from .consistency import Consistency
from .matrix_builder import build_comparison_matrix
from .model import Factor, FactorTable
from .scoring import score_factors
from .types import AHPResult
from .weight_derivation import power_iteration


def recompute(
    factors: Union[FactorTable, Sequence[Factor], Sequence[Sequence[Any]]],
    max_iter: int = MAX_ITER,
    tol: float = TOLERANCE
) -> AHPResult:
    """
    Derives factor weights and consistency figures from class-break counts.

    Never raises for degenerate numeric input. A factor whose counts are all
    zero or missing gets a class score of 0 and is reported through
    ``AHPResult.zero_total_factors`` and a ``UserWarning``; the computation
    still completes.

    Args:
        factors: A FactorTable, a list of Factor objects, or one sequence of
                 class counts per factor.
        max_iter: Maximum power-iteration steps.
        tol: Power-iteration convergence tolerance.

    Returns:
        An AHPResult holding scores, matrix, weights, lambda_max, CI and CR.
    """
    scores = score_factors(list(factors))
    names = [s.name for s in scores]

    matrix = build_comparison_matrix(scores)
    eigen = power_iteration(matrix, max_iter=max_iter, tol=tol)
    consistency = Consistency.evaluate(len(scores), eigen["lambda_max"])

    result = AHPResult(
        names=names,
        scores=scores,
        matrix=matrix,
        weights=eigen["weights"],
        lambda_max=eigen["lambda_max"],
        ci=consistency["ci"],
        cr=consistency["cr"],
        ri=consistency["ri"],
        iterations=eigen["iterations"],
        converged=eigen["converged"]
    )

    empty = result.zero_total_factors
    if empty:
        warnings.warn(
            f"Factor(s) {', '.join(empty)} have a total count of 0. The comparison matrix may be "
            "uninformative for them.",
            UserWarning
        )

    return result

from __future__ import annotations
import math
from typing import Any, List, Sequence, Union

from .model import ClassBin, Factor, FactorTable
from .types import ClassScore


def parse_count(value: Any) -> float:
    """
    Interprets a class count as typed by the user.

    Numbers pass through, numeric strings are parsed and anything else
    (None, empty string, garbage) becomes NaN so that it is ignored.
    """
    if isinstance(value, ClassBin):
        value = value.count
    if value is None or isinstance(value, bool):
        return float("nan")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return float("nan")
    try:
        return float(value)
    except (TypeError, ValueError):
        return float("nan")


def class_score(bins: Sequence[Union[ClassBin, Any]], name: str = "") -> ClassScore:
    """
    Collapses a factor's class counts into a single score.

    S = sum(k * count_k) / sum(count_k) over the classes whose count is a
    finite, strictly positive number, with k the 1-based class index.
    Classes with any other count are skipped. A factor with no usable count
    gets S = 0 and total = 0.

    Args:
        bins: ClassBin entries (or raw counts) ordered from class 1 (best)
              to class m (worst).
        name: Factor name attached to the returned score.

    Returns:
        A ClassScore with ``S`` and ``total``.
    """
    total = 0.0
    weighted = 0.0
    for k, b in enumerate(bins, start=1):
        c = parse_count(b)
        if math.isfinite(c) and c > 0:
            total += c
            weighted += k * c

    S = weighted / total if total > 0 else 0.0
    return ClassScore(name, S, total)


def score_factors(factors: Sequence[Union[Factor, Sequence[Any]]]) -> List[ClassScore]:
    """Scores every factor in order. Raw count sequences get positional names."""
    scores = []
    for i, f in enumerate(factors):
        if isinstance(f, Factor):
            scores.append(class_score(f.bins, name=f.name))
        else:
            scores.append(class_score(f, name=FactorTable.default_name(i + 1)))
    return scores

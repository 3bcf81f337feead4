from __future__ import annotations
import math
from typing import Any, Dict, List, Optional, Sequence, TYPE_CHECKING
import numpy as np

from .config import MIN_FACTORS, MAX_FACTORS, MIN_CLASSES, MAX_CLASSES
from .matrix_builder import SaatyScale
from .scoring import parse_count

if TYPE_CHECKING:
    from .model import Factor, FactorTable


class Validation:
    """
    A class containing static methods to validate factor tables and derived
    comparison matrices. Every method returns a list of error strings; an
    empty list means the input is valid.
    """

    @staticmethod
    def validate_matrix_dimensions(matrix: np.ndarray, expected_size: int | None = None) -> List[str]:
        """Validates that a matrix is a 2D square NumPy array of the expected size."""
        errors = []
        if not isinstance(matrix, np.ndarray) or matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            errors.append("Input must be a 2D square NumPy array.")
            return errors
        if expected_size is not None and matrix.shape[0] != expected_size:
            errors.append(f"Matrix has size {matrix.shape[0]}, but expected size {expected_size}.")
        return errors

    @staticmethod
    def validate_matrix_properties(matrix: np.ndarray, tolerance: float = 1e-9) -> List[str]:
        """
        Validates a single comparison matrix for dimensions, diagonal,
        reciprocity and membership of the Saaty scale.

        Args:
            matrix: The comparison matrix to validate.
            tolerance: Tolerance for floating-point checks.

        Returns:
            A list of error strings.
        """
        errors = Validation.validate_matrix_dimensions(matrix)
        if errors:
            return errors

        A = matrix.astype(float)
        n = A.shape[0]

        for i in range(n):
            if abs(A[i, i] - 1.0) > tolerance:
                errors.append(f"Diagonal element at ({i},{i}) is not 1. Found: {A[i, i]}")

        for i in range(n):
            for j in range(i + 1, n):
                if abs(A[i, j] * A[j, i] - 1.0) > tolerance:
                    errors.append(f"Reciprocity failed between ({i},{j}) and ({j},{i}). "
                                  f"Values: {A[i, j]}, {A[j, i]}")
                for (r, c) in ((i, j), (j, i)):
                    if not SaatyScale.is_saaty_value(A[r, c], tolerance):
                        errors.append(f"Element at ({r},{c}) = {A[r, c]} is not a Saaty scale value.")

        return errors

    @staticmethod
    def validate_factor_counts(factor: Factor) -> List[str]:
        """Flags counts that will be ignored by the scoring step."""
        errors = []
        for k, b in enumerate(factor.bins, start=1):
            if b.count is None or (isinstance(b.count, str) and not b.count.strip()):
                continue
            c = parse_count(b.count)
            if not math.isfinite(c):
                errors.append(f"Factor '{factor.name}', class {k}: count {b.count!r} is not a finite number and will be ignored.")
            elif c < 0:
                errors.append(f"Factor '{factor.name}', class {k}: negative count {b.count!r} will be ignored.")
        return errors

    @staticmethod
    def validate_factor_table(factors: FactorTable | Sequence[Factor]) -> List[str]:
        """
        Validates the structure of the factor tables: number of factors and
        classes within bounds, equal class counts, unique non-empty names and
        usable counts.
        """
        errors = []
        factors = list(factors)
        n = len(factors)

        if not MIN_FACTORS <= n <= MAX_FACTORS:
            errors.append(f"Number of factors must be between {MIN_FACTORS} and {MAX_FACTORS}. Found: {n}")
        if n == 0:
            return errors

        class_counts = {len(f.bins) for f in factors}
        if len(class_counts) > 1:
            errors.append(f"All factors must have the same number of classes. Found: {sorted(class_counts)}")
        for m in sorted(class_counts):
            if not MIN_CLASSES <= m <= MAX_CLASSES:
                errors.append(f"Number of classes must be between {MIN_CLASSES} and {MAX_CLASSES}. Found: {m}")

        seen = set()
        for i, f in enumerate(factors):
            name = str(f.name).strip() if f.name is not None else ""
            if not name:
                errors.append(f"Factor at position {i + 1} has an empty name.")
            elif name in seen:
                errors.append(f"Duplicate factor name '{name}'.")
            seen.add(name)
            errors.extend(Validation.validate_factor_counts(f))

        return errors

    @staticmethod
    def run_all_validations(
        factors: FactorTable | Sequence[Factor],
        matrix: Optional[np.ndarray] = None,
        tolerance: float = 1e-9
    ) -> Dict[str, List[str]]:
        """
        Runs a complete suite of validations.

        Args:
            factors: The factor tables.
            matrix (optional): A derived comparison matrix to check as well.
            tolerance: Tolerance for floating-point comparisons.

        Returns:
            A dictionary containing lists of errors for each validation category.
        """
        all_errors: Dict[str, Any] = {
            "factor_table": Validation.validate_factor_table(factors),
            "matrix_properties": []
        }
        if matrix is not None:
            all_errors["matrix_properties"] = Validation.validate_matrix_properties(
                matrix, tolerance
            )
        return all_errors

from __future__ import annotations
from typing import Any, Callable, Dict, Optional
import numpy as np

from .config import configure_parameters, RANDOM_INDEX, RI_FALLBACK


class Registry(dict):
    """
    A custom dictionary that validates insertions to ensure only
    callable objects (functions, methods) are registered.
    """
    def __setitem__(self, key: str, value: Callable):
        if not callable(value):
            raise TypeError(
                f"Attempted to register a non-callable object of type '{type(value).__name__}' "
                f"for the key '{key}'. Only functions or methods can be registered."
            )
        if key in self:
            print(f"Warning: Overwriting consistency method '{key}'")
        super().__setitem__(key, value)

    def register(self, name: str) -> Callable:
        """Decorator factory for registering a function."""
        def decorator(func: Callable) -> Callable:
            self[name] = func
            return func
        return decorator

CONSISTENCY_METHODS = Registry()

def register_consistency_method(name: str) -> Callable:
    """
    A decorator to register an additional matrix consistency index.

    The decorated function receives the crisp comparison matrix as a float
    NumPy array (plus keyword arguments it may ignore) and returns a float.
    """
    return CONSISTENCY_METHODS.register(name)


class Consistency:
    """
    A class with static methods to compute Saaty's consistency index and
    ratio, and related diagnostics, for a derived comparison matrix.
    """
    @staticmethod
    def _get_random_index(n: int) -> float:
        """
        Retrieves the Random Consistency Index (RI) for a matrix of size n.
        Sizes above the table fall back to its largest entry (1.59).
        """
        return RANDOM_INDEX.get(n, RI_FALLBACK)

    @staticmethod
    def _get_gci_threshold(n: int) -> float:
        return configure_parameters.GCI_THRESHOLDS.get(n, configure_parameters.GCI_THRESHOLDS['default'])

    @staticmethod
    def calculate_ci(n: int, lambda_max: float) -> float:
        """
        CI = (lambda_max - n) / (n - 1).

        A 1x1 or 2x2 reciprocal matrix is always perfectly consistent, so
        CI is defined as 0 for n <= 2.
        """
        if n <= 2:
            return 0.0
        return (lambda_max - n) / (n - 1)

    @staticmethod
    def evaluate(n: int, lambda_max: float) -> Dict[str, float]:
        """
        Computes the Consistency Index and Ratio from the principal eigenvalue.

        Args:
            n: The size of the comparison matrix.
            lambda_max: The dominant eigenvalue estimate.

        Returns:
            A dictionary with ``ci``, ``cr`` and the ``ri`` used. CR is 0
            whenever RI is 0 (n <= 2).
        """
        ci = Consistency.calculate_ci(n, lambda_max)
        ri = Consistency._get_random_index(n)
        cr = ci / ri if ri != 0 else 0.0
        return {"ci": ci, "cr": cr, "ri": ri}

    @staticmethod
    def is_acceptable(cr: float, threshold: Optional[float] = None) -> bool:
        """
        Applies the conventional acceptance rule CR <= 0.10 (or ``threshold``).
        The numerical routines never enforce it; it is a decision for the caller.
        """
        limit = threshold if threshold is not None else configure_parameters.DEFAULT_CR_THRESHOLD
        return cr <= limit

    @CONSISTENCY_METHODS.register("saaty_cr")
    def calculate_saaty_cr(matrix: np.ndarray, lambda_max: Optional[float] = None, **kwargs) -> float:
        """
        Calculates Saaty's Consistency Ratio (CR) of a crisp matrix.

        If ``lambda_max`` is not supplied it is estimated by power iteration.
        """
        from .weight_derivation import power_iteration

        crisp_matrix = np.asarray(matrix, dtype=float)
        n = crisp_matrix.shape[0]
        if lambda_max is None:
            lambda_max = power_iteration(crisp_matrix)["lambda_max"]
        return Consistency.evaluate(n, lambda_max)["cr"]

    @CONSISTENCY_METHODS.register("gci")
    def calculate_gci(matrix: np.ndarray, **kwargs) -> float:
        """
        Calculates the Geometric Consistency Index (GCI) for the matrix.
        A lower GCI value indicates better consistency.

        .. note::
            **Academic Note:** GCI is an alternative to Saaty's CR. Thresholds
            proposed by Aguarón & Moreno-Jiménez (2003) are often cited:
            GCI <= 0.31 for n=3, <= 0.35 for n=4, <= 0.37 for n>4.
        """
        crisp_matrix = np.asarray(matrix, dtype=float)
        n = crisp_matrix.shape[0]
        if n <= 2: return 0.0

        sanitized = np.maximum(crisp_matrix, 1e-9)
        log_matrix = np.log(sanitized)
        weights = np.exp(np.mean(log_matrix, axis=1))
        weights /= np.sum(weights)

        sum_of_squared_errors = 0.0
        for i in range(n):
            for j in range(i + 1, n):
                error = log_matrix[i, j] - np.log(weights[i]) + np.log(weights[j])
                sum_of_squared_errors += error**2

        return float((2 / ((n - 1) * (n - 2))) * sum_of_squared_errors)

    @staticmethod
    def check_matrix_consistency(
        matrix: np.ndarray,
        lambda_max: Optional[float] = None,
        saaty_cr_threshold: Optional[float] = None
    ) -> Dict[str, Any]:
        """
        Runs every registered consistency index on a comparison matrix.

        A matrix is flagged ``is_consistent`` when Saaty's CR is within its
        threshold and the GCI is within its size-dependent threshold. Extra
        indices registered through ``register_consistency_method`` are
        reported but do not affect the flag.

        Args:
            matrix: The crisp comparison matrix.
            lambda_max (optional): A precomputed principal eigenvalue, reused
                for the CR instead of iterating again.
            saaty_cr_threshold (optional): Overrides DEFAULT_CR_THRESHOLD.

        Returns:
            A dictionary of index name -> value, plus ``matrix_size`` and
            ``is_consistent``.
        """
        crisp_matrix = np.asarray(matrix, dtype=float)
        n = crisp_matrix.shape[0]
        report: Dict[str, Any] = {"matrix_size": n}

        for name, func in CONSISTENCY_METHODS.items():
            report[name] = func(crisp_matrix, lambda_max=lambda_max)

        consistent = True
        if not Consistency.is_acceptable(report["saaty_cr"], saaty_cr_threshold):
            consistent = False
        if report["gci"] > Consistency._get_gci_threshold(n):
            consistent = False

        report["is_consistent"] = consistent
        return report

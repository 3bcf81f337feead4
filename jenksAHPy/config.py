from types import MappingProxyType
from typing import Dict, Tuple, Mapping


# --- Fixed tables ---

# Random Consistency Index (RI) by matrix size.
RANDOM_INDEX: Mapping[int, float] = MappingProxyType({
    1: 0.00, 2: 0.00, 3: 0.58, 4: 0.90, 5: 1.12, 6: 1.24, 7: 1.32,
    8: 1.41, 9: 1.45, 10: 1.49, 11: 1.51, 12: 1.48, 13: 1.56, 14: 1.57, 15: 1.59,
})

# RI used for n > 15
RI_FALLBACK: float = 1.59

# Closed-open brackets (upper_bound, saaty_value) for ratios r >= 1.
# A ratio equal to a bound falls in the next bracket.
SAATY_THRESHOLDS: Tuple[Tuple[float, float], ...] = (
    (1.25, 1.0),
    (2.5, 3.0),
    (4.5, 5.0),
    (6.5, 7.0),
    (float("inf"), 9.0),
)

SAATY_VALUES: Tuple[float, ...] = (1/9, 1/7, 1/5, 1/3, 1.0, 3.0, 5.0, 7.0, 9.0)


# --- Fixed parameters ---

MIN_FACTORS: int = 2
MAX_FACTORS: int = 15
MIN_CLASSES: int = 3
MAX_CLASSES: int = 9

MAX_ITER: int = 1000
TOLERANCE: float = 1e-10

EXPORT_DECIMALS: int = 6


class Configuration:
    """
    A singleton-like class to hold the caller-facing parameters of jenksAHPy.

    The random-index table, the Saaty brackets and the power-iteration limits
    are module constants and are deliberately not part of this object. Only
    presentation and acceptance settings can be changed here.

    Example:
    >>> from jenksAHPy.config import configure_parameters
    >>> # Require a stricter consistency ratio for acceptance
    >>> configure_parameters.DEFAULT_CR_THRESHOLD = 0.05
    >>> # Name new factors in Portuguese
    >>> configure_parameters.FACTOR_NAME_TEMPLATE = "Fator {index}"
    """

    def __init__(self):
        self.reset_to_defaults()

    def reset_to_defaults(self):
        """Resets all configuration parameters to their original default values."""

        # --- Consistency Parameters ---

        # Conventional acceptance threshold for Saaty's CR
        self.DEFAULT_CR_THRESHOLD: float = 0.10

        # Geometric Consistency Index (GCI) thresholds
        # Source: Aguarón & Moreno-Jiménez (2003)
        self.GCI_THRESHOLDS: Dict[int | str, float] = {
            3: 0.31,
            4: 0.35,
            'default': 0.37  # Default for n > 4
        }

        # --- Factor Table Defaults ---

        self.DEFAULT_FACTORS: int = 4
        self.DEFAULT_CLASSES: int = 5
        self.FACTOR_NAME_TEMPLATE: str = "Factor {index}"

        # --- Display Parameters ---

        self.DISPLAY_DECIMALS: int = 4
        self.SCORE_DECIMALS: int = 3
        self.WEIGHT_DECIMALS: int = 6

        # --- General Numerical Parameters ---

        # Small tolerance value for float comparisons, reciprocity checks, etc.
        self.FLOAT_TOLERANCE: float = 1e-9


configure_parameters = Configuration()


class ConfigurationContextManager:
    """
    A context manager to temporarily change configuration parameters.

    Usage:
    >>> with ConfigurationContextManager(DEFAULT_CR_THRESHOLD=0.05):
    >>>     # Code block runs with CR threshold set to 0.05
    >>>     ...
    >>> # CR threshold reverts to its original value outside the block
    """
    def __init__(self, **kwargs):
        self.changes = kwargs
        self.original_values = {}

    def __enter__(self):
        for key, value in self.changes.items():
            if not hasattr(configure_parameters, key):
                raise AttributeError(f"Configuration object has no attribute '{key}'")
            self.original_values[key] = getattr(configure_parameters, key)
            setattr(configure_parameters, key, value)
        return configure_parameters

    def __exit__(self, exc_type, exc_val, exc_tb):
        for key, value in self.original_values.items():
            setattr(configure_parameters, key, value)

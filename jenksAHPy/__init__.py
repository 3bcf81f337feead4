__version__ = "0.1.0"

from .config import configure_parameters, ConfigurationContextManager
from .model import ClassBin, Factor, FactorTable
from .types import ClassScore, AHPResult
from .scoring import class_score, score_factors
from .matrix_builder import SaatyScale, build_comparison_matrix
from .weight_derivation import power_iteration
from .consistency import Consistency, register_consistency_method
from .validation import Validation
from .pipeline import recompute

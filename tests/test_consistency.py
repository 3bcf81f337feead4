"""
===================================================================
Tests for the Consistency Module
===================================================================

This script contains unit tests for the consistency index / ratio
calculations and the additional consistency diagnostics.

To run tests, navigate to the root directory and run:
$ pytest
"""

import pytest
import numpy as np

from jenksAHPy.consistency import Consistency, CONSISTENCY_METHODS, register_consistency_method
from jenksAHPy.config import ConfigurationContextManager

# ==============================================================================
# Test Fixtures
# ==============================================================================

@pytest.fixture
def very_inconsistent_matrix() -> np.ndarray:
    """A cyclic judgment pattern: A >> B >> C >> A."""
    return np.array([
        [1, 9, 1/9],
        [1/9, 1, 9],
        [9, 1/9, 1]
    ])

# ==============================================================================
# Random index and CI / CR
# ==============================================================================

def test_get_random_index():
    """Tests the retrieval of RI values for various matrix sizes."""
    assert Consistency._get_random_index(1) == 0.00
    assert Consistency._get_random_index(2) == 0.00
    assert Consistency._get_random_index(3) == 0.58
    assert Consistency._get_random_index(12) == 1.48
    assert Consistency._get_random_index(15) == 1.59
    assert Consistency._get_random_index(20) == 1.59  # Test fallback

def test_calculate_ci():
    assert Consistency.calculate_ci(3, 3.0) == 0.0
    assert Consistency.calculate_ci(4, 4.3) == pytest.approx(0.1)
    assert Consistency.calculate_ci(2, 5.0) == 0.0
    assert Consistency.calculate_ci(1, 1.0) == 0.0

def test_evaluate_for_small_matrices_is_zero():
    """1x1 and 2x2 reciprocal matrices are always consistent."""
    for n in (1, 2):
        result = Consistency.evaluate(n, 7.5)
        assert result == {"ci": 0.0, "cr": 0.0, "ri": 0.0}

def test_evaluate_classic_example():
    result = Consistency.evaluate(3, 3.0385)
    assert result["ci"] == pytest.approx(0.01925)
    assert result["ri"] == 0.58
    assert result["cr"] == pytest.approx(0.01925 / 0.58)

def test_evaluate_uses_fallback_ri_beyond_table():
    result = Consistency.evaluate(16, 17.5)
    assert result["ri"] == 1.59
    assert result["cr"] == pytest.approx((1.5 / 15) / 1.59)

def test_evaluate_zero_size_does_not_fail():
    result = Consistency.evaluate(0, 0.0)
    assert result["ci"] == 0.0
    assert result["cr"] == 0.0

def test_is_acceptable_threshold():
    assert Consistency.is_acceptable(0.10)
    assert not Consistency.is_acceptable(0.1001)
    assert Consistency.is_acceptable(0.15, threshold=0.2)
    with ConfigurationContextManager(DEFAULT_CR_THRESHOLD=0.05):
        assert not Consistency.is_acceptable(0.08)

# ==============================================================================
# Matrix-level diagnostics
# ==============================================================================

def test_cr_for_perfectly_consistent_matrix(consistent_matrix):
    """A perfectly consistent matrix must have a CR of approximately 0."""
    cr = Consistency.calculate_saaty_cr(consistent_matrix)
    assert cr == pytest.approx(0.0, abs=1e-9)

def test_cr_for_classic_matrix(classic_matrix):
    cr = Consistency.calculate_saaty_cr(classic_matrix)
    assert cr == pytest.approx(0.0332, abs=1e-3)

def test_cr_uses_supplied_lambda_max(classic_matrix):
    cr = Consistency.calculate_saaty_cr(classic_matrix, lambda_max=3.58)
    assert cr == pytest.approx((0.58 / 2) / 0.58)

def test_gci_for_consistent_matrix(consistent_matrix):
    assert Consistency.calculate_gci(consistent_matrix) == pytest.approx(0.0, abs=1e-12)

def test_gci_for_classic_matrix(classic_matrix):
    assert Consistency.calculate_gci(classic_matrix) == pytest.approx(0.1151, abs=1e-3)

def test_gci_for_2x2_matrix():
    assert Consistency.calculate_gci(np.array([[1, 5], [0.2, 1]])) == 0.0

def test_check_matrix_consistency_passes(classic_matrix):
    report = Consistency.check_matrix_consistency(classic_matrix)
    assert report["matrix_size"] == 3
    assert "saaty_cr" in report and "gci" in report
    assert report["is_consistent"] is True

def test_check_matrix_consistency_flags_cyclic_judgments(very_inconsistent_matrix):
    report = Consistency.check_matrix_consistency(very_inconsistent_matrix)
    assert report["saaty_cr"] > 1.0
    assert report["is_consistent"] is False

def test_check_matrix_consistency_custom_threshold(classic_matrix):
    report = Consistency.check_matrix_consistency(classic_matrix, saaty_cr_threshold=0.01)
    assert report["is_consistent"] is False

def test_register_consistency_method(classic_matrix):
    @register_consistency_method("max_entry")
    def max_entry(matrix, **kwargs):
        return float(np.max(matrix))

    try:
        report = Consistency.check_matrix_consistency(classic_matrix)
        assert report["max_entry"] == 5.0
        assert report["is_consistent"] is True
    finally:
        del CONSISTENCY_METHODS["max_entry"]

def test_registry_rejects_non_callables():
    with pytest.raises(TypeError, match="non-callable"):
        CONSISTENCY_METHODS["bad"] = 42

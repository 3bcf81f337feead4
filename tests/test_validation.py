"""
===================================================================
Tests for the Validation Module
===================================================================

This script contains unit tests for the validation functionalities, ensuring
that malformed factor tables and matrices are correctly identified.
"""

import pytest
import numpy as np

from jenksAHPy.validation import Validation
from jenksAHPy.model import Factor, FactorTable
from jenksAHPy.matrix_builder import build_comparison_matrix

# --- Test Fixtures: Reusable valid and invalid components ---

@pytest.fixture
def valid_matrix() -> np.ndarray:
    """A valid, 3x3 reciprocal Saaty matrix."""
    return np.array([
        [1, 3, 5],
        [1/3, 1, 3],
        [1/5, 1/3, 1]
    ])

@pytest.fixture
def non_square_matrix() -> np.ndarray:
    return np.ones((3, 2))

@pytest.fixture
def bad_diagonal_matrix() -> np.ndarray:
    return np.array([
        [1, 3],
        [1/3, 3]  # Diagonal should be 1
    ])

@pytest.fixture
def non_reciprocal_matrix() -> np.ndarray:
    return np.array([
        [1, 3],
        [0.5, 1]  # Should be 1/3
    ])

@pytest.fixture
def off_scale_matrix() -> np.ndarray:
    return np.array([
        [1, 2],
        [0.5, 1]  # 2 is not produced by the bracket mapping
    ])


# --- Matrix validation ---

def test_valid_matrix_passes(valid_matrix):
    assert Validation.validate_matrix_properties(valid_matrix) == []

def test_non_square_matrix_fails(non_square_matrix):
    errors = Validation.validate_matrix_properties(non_square_matrix)
    assert len(errors) == 1
    assert "square" in errors[0]

def test_matrix_dimensions_expected_size(valid_matrix):
    assert Validation.validate_matrix_dimensions(valid_matrix, expected_size=3) == []
    errors = Validation.validate_matrix_dimensions(valid_matrix, expected_size=4)
    assert "expected size 4" in errors[0]

def test_nested_list_is_not_a_matrix():
    errors = Validation.validate_matrix_dimensions([[1, 1], [1, 1]])
    assert errors == ["Input must be a 2D square NumPy array."]

def test_bad_diagonal_fails(bad_diagonal_matrix):
    errors = Validation.validate_matrix_properties(bad_diagonal_matrix)
    assert any("Diagonal element at (1,1)" in e for e in errors)

def test_non_reciprocal_fails(non_reciprocal_matrix):
    errors = Validation.validate_matrix_properties(non_reciprocal_matrix)
    assert any("Reciprocity failed" in e for e in errors)

def test_off_scale_value_fails(off_scale_matrix):
    errors = Validation.validate_matrix_properties(off_scale_matrix)
    assert any("not a Saaty scale value" in e for e in errors)
    assert not any("Reciprocity" in e for e in errors)

def test_built_matrices_always_validate():
    scores = [0.0, 1.0, 1.3, 2.9, 4.4, 6.0, 8.7]
    matrix = build_comparison_matrix(scores)
    assert Validation.validate_matrix_properties(matrix) == []


# --- Factor table validation ---

def test_valid_factor_table_passes(factor_table):
    assert Validation.validate_factor_table(factor_table) == []

def test_too_few_factors():
    errors = Validation.validate_factor_table([Factor.from_counts("Only", [1, 2, 3])])
    assert any("between 2 and 15" in e for e in errors)

def test_empty_table():
    errors = Validation.validate_factor_table(FactorTable())
    assert errors == ["Number of factors must be between 2 and 15. Found: 0"]

def test_unequal_class_counts():
    table = FactorTable([Factor.from_counts("A", [1, 2, 3]), Factor.from_counts("B", [1, 2, 3, 4])])
    errors = Validation.validate_factor_table(table)
    assert any("same number of classes" in e for e in errors)

def test_class_count_out_of_range():
    table = FactorTable.from_counts([[1, 2], [3, 4]])
    errors = Validation.validate_factor_table(table)
    assert any("between 3 and 9" in e for e in errors)

def test_empty_and_duplicate_names():
    table = FactorTable([
        Factor.from_counts("A", [1, 1, 1]),
        Factor.from_counts("  ", [1, 1, 1]),
        Factor.from_counts("A", [1, 1, 1]),
    ])
    errors = Validation.validate_factor_table(table)
    assert any("empty name" in e for e in errors)
    assert any("Duplicate factor name 'A'" in e for e in errors)

def test_unusable_counts_are_reported():
    factor = Factor.from_counts("Slope", [4, -1, "abc", "", None, float("inf")])
    errors = Validation.validate_factor_counts(factor)
    assert len(errors) == 3
    assert "class 2: negative count" in errors[0]
    assert "class 3" in errors[1]
    assert "class 6" in errors[2]

def test_run_all_validations(factor_table, valid_matrix):
    report = Validation.run_all_validations(factor_table, matrix=valid_matrix)
    assert report == {"factor_table": [], "matrix_properties": []}

    report = Validation.run_all_validations(factor_table)
    assert report["matrix_properties"] == []

def test_run_all_validations_collects_matrix_errors(factor_table, non_reciprocal_matrix):
    report = Validation.run_all_validations(factor_table, matrix=non_reciprocal_matrix)
    assert report["factor_table"] == []
    assert report["matrix_properties"]

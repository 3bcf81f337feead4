import pytest
import numpy as np
import pandas as pd
from pathlib import Path

from jenksAHPy.model import FactorTable

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture(scope="session")
def class_tables_df() -> pd.DataFrame:
    """Raw long-format class tables: Slope, Rainfall and Land cover, 5 classes each."""
    return pd.read_csv(DATA_DIR / "class_tables.csv")


@pytest.fixture
def factor_table(class_tables_df) -> FactorTable:
    """A fresh FactorTable built from the sample data for each test."""
    return FactorTable.from_dataframe(class_tables_df)


@pytest.fixture
def classic_matrix() -> np.ndarray:
    """The textbook 3x3 Saaty matrix with a small, acceptable inconsistency."""
    return np.array([
        [1, 3, 5],
        [1/3, 1, 3],
        [1/5, 1/3, 1]
    ], dtype=float)


@pytest.fixture
def consistent_matrix() -> np.ndarray:
    """A perfectly consistent 3x3 matrix (a_ik = a_ij * a_jk)."""
    return np.array([
        [1, 3, 9],
        [1/3, 1, 3],
        [1/9, 1/3, 1]
    ], dtype=float)

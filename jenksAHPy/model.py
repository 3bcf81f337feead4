from __future__ import annotations
import json
import math
from typing import Any, Dict, Iterator, List, Optional, Sequence
import numpy as np

from .config import (
    configure_parameters,
    MIN_FACTORS, MAX_FACTORS, MIN_CLASSES, MAX_CLASSES,
)

try:
    import pandas as pd
    _PANDAS_AVAILABLE = True
except ImportError:
    _PANDAS_AVAILABLE = False

def _check_pandas_availability():
    """Helper function to raise an error if pandas is not installed."""
    if not _PANDAS_AVAILABLE:
        raise ImportError("DataFrame import/export requires the 'pandas' library. "
                          "Please install it using: pip install pandas")


def clamp_size(value: Any, low: int, high: int) -> int:
    """
    Coerces a user-supplied table size into ``[low, high]``.

    Floats are floored; anything non-numeric, NaN or zero falls back to
    ``low``.
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        return low
    if math.isnan(number):
        return low
    if math.isinf(number):
        return high if number > 0 else low
    number = int(math.floor(number))
    if number == 0:
        return low
    return max(low, min(high, number))


class ClassBin:
    """
    One class of a factor's break table.

    ``min`` and ``max`` are display strings carried through untouched.
    ``count`` is whatever the caller typed (number, numeric string or empty);
    it is only interpreted by the scoring step.
    """
    def __init__(self, min: Any = "", max: Any = "", count: Any = ""):
        self.min = min
        self.max = max
        self.count = count

    def __repr__(self) -> str:
        return f"ClassBin(min={self.min!r}, max={self.max!r}, count={self.count!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ClassBin):
            return NotImplemented
        return (self.min, self.max, self.count) == (other.min, other.max, other.count)

    def copy(self) -> ClassBin:
        return ClassBin(self.min, self.max, self.count)

    def to_dict(self) -> Dict[str, Any]:
        return {"min": self.min, "max": self.max, "count": self.count}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ClassBin:
        return cls(min=data.get("min", ""), max=data.get("max", ""), count=data.get("count", ""))


class Factor:
    """
    A named factor with its ordered class table (class 1 = best).
    """
    def __init__(self, name: str, bins: Optional[Sequence[ClassBin]] = None):
        self.name = name
        self.bins: List[ClassBin] = list(bins) if bins is not None else []

    def __repr__(self) -> str:
        counts = [b.count for b in self.bins]
        return f"Factor(name='{self.name}', counts={counts})"

    def __len__(self) -> int:
        return len(self.bins)

    @property
    def counts(self) -> List[Any]:
        return [b.count for b in self.bins]

    def _bin(self, class_index: int) -> ClassBin:
        if not 1 <= class_index <= len(self.bins):
            raise IndexError(f"Class index {class_index} is out of range 1..{len(self.bins)} for factor '{self.name}'.")
        return self.bins[class_index - 1]

    def set_count(self, class_index: int, value: Any):
        """Sets the count of a class, addressed by its 1-based index."""
        self._bin(class_index).count = value

    def set_bounds(self, class_index: int, min: Any, max: Any):
        """Sets the display bounds of a class, addressed by its 1-based index."""
        b = self._bin(class_index)
        b.min = min
        b.max = max

    def resized(self, num_classes: int) -> Factor:
        """Returns a copy with exactly ``num_classes`` bins, keeping existing ones."""
        bins = [self.bins[k].copy() if k < len(self.bins) else ClassBin() for k in range(num_classes)]
        return Factor(self.name, bins)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "classes": [b.to_dict() for b in self.bins]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Factor:
        if "name" not in data:
            raise ValueError("Factor data must contain a 'name' key.")
        return cls(data["name"], [ClassBin.from_dict(b) for b in data.get("classes", [])])

    @classmethod
    def from_counts(cls, name: str, counts: Sequence[Any]) -> Factor:
        return cls(name, [ClassBin(count=c) for c in counts])


class FactorTable:
    """
    The ordered set of factors handed to the weighting pipeline.

    Sizes are clamped to the supported range here, at the input boundary;
    the numerical core itself accepts any number of factors.
    """
    def __init__(self, factors: Optional[Sequence[Factor]] = None):
        self.factors: List[Factor] = list(factors) if factors is not None else []

    def __repr__(self) -> str:
        return f"FactorTable(n={self.n}, m={self.m}, factors={self.names})"

    def __len__(self) -> int:
        return len(self.factors)

    def __iter__(self) -> Iterator[Factor]:
        return iter(self.factors)

    def __getitem__(self, index: int) -> Factor:
        return self.factors[index]

    @property
    def n(self) -> int:
        return len(self.factors)

    @property
    def m(self) -> int:
        return max((len(f) for f in self.factors), default=0)

    @property
    def names(self) -> List[str]:
        return [f.name for f in self.factors]

    @staticmethod
    def default_name(index: int) -> str:
        return configure_parameters.FACTOR_NAME_TEMPLATE.format(index=index)

    @classmethod
    def create(cls, n: Optional[int] = None, m: Optional[int] = None) -> FactorTable:
        """Creates an empty ``n`` x ``m`` table with default factor names."""
        n = clamp_size(configure_parameters.DEFAULT_FACTORS if n is None else n, MIN_FACTORS, MAX_FACTORS)
        m = clamp_size(configure_parameters.DEFAULT_CLASSES if m is None else m, MIN_CLASSES, MAX_CLASSES)
        return cls([Factor(cls.default_name(i + 1), [ClassBin() for _ in range(m)]) for i in range(n)])

    def resize(self, n: Any, m: Any) -> FactorTable:
        """
        Resizes the table in place to ``n`` factors of ``m`` classes.

        Both sizes are clamped (n to [2, 15], m to [3, 9]). Names and bins
        that survive the resize keep their contents; new factors get default
        names and new bins are empty.
        """
        n = clamp_size(n, MIN_FACTORS, MAX_FACTORS)
        m = clamp_size(m, MIN_CLASSES, MAX_CLASSES)

        resized = []
        for i in range(n):
            if i < len(self.factors):
                resized.append(self.factors[i].resized(m))
            else:
                resized.append(Factor(self.default_name(i + 1), [ClassBin() for _ in range(m)]))
        self.factors = resized
        return self

    def add_factor(self, factor: Factor):
        if any(f.name == factor.name for f in self.factors):
            raise ValueError(f"Factor '{factor.name}' already exists in the table.")
        self.factors.append(factor)

    def get_factor(self, name: str) -> Factor:
        for f in self.factors:
            if f.name == name:
                return f
        raise ValueError(f"Factor '{name}' not found in the table.")

    def rename_factor(self, index: int, name: str):
        self.factors[index].name = name

    def any_zero_totals(self) -> bool:
        """True when at least one factor has no positive count at all."""
        from .scoring import score_factors
        return any(s.total == 0 for s in score_factors(self.factors))

    # --- Serialization ---

    @classmethod
    def from_counts(cls, counts: Sequence[Sequence[Any]], names: Optional[Sequence[str]] = None) -> FactorTable:
        """Builds a table from one sequence of class counts per factor."""
        if names is not None and len(names) != len(counts):
            raise ValueError("Length of names must match the number of count rows.")
        factors = []
        for i, row in enumerate(counts):
            name = names[i] if names is not None else cls.default_name(i + 1)
            factors.append(Factor.from_counts(name, row))
        return cls(factors)

    def to_dict(self) -> Dict[str, Any]:
        """Serializes the table to a JSON-compatible dictionary."""
        return {"factors": [f.to_dict() for f in self.factors]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> FactorTable:
        if "factors" not in data:
            raise ValueError("Factor table data must contain a 'factors' key.")
        return cls([Factor.from_dict(f) for f in data["factors"]])

    def to_json(self, **kwargs) -> str:
        return json.dumps(self.to_dict(), **kwargs)

    @classmethod
    def from_json(cls, json_string: str) -> FactorTable:
        """Constructs a table from a JSON string produced by ``to_json``."""
        return cls.from_dict(json.loads(json_string))

    def to_dataframe(self) -> 'pd.DataFrame':
        """
        Exports the class tables in long format.

        Returns:
            A pandas DataFrame with columns ``factor``, ``class`` (1-based),
            ``min``, ``max`` and ``count``.
        """
        _check_pandas_availability()

        rows = []
        for f in self.factors:
            for k, b in enumerate(f.bins, start=1):
                rows.append({"factor": f.name, "class": k, "min": b.min, "max": b.max, "count": b.count})
        return pd.DataFrame(rows, columns=["factor", "class", "min", "max", "count"])

    @classmethod
    def from_dataframe(cls, df: 'pd.DataFrame') -> FactorTable:
        """
        Constructs a table from a long-format DataFrame.

        The DataFrame must contain ``factor``, ``class`` and ``count`` columns;
        ``min`` and ``max`` are optional. Factors keep their order of first
        appearance and each row lands at its 1-based ``class`` index. Every
        factor gets as many classes as the largest index in the frame;
        classes a factor does not list are left empty.

        Raises:
            ValueError: If a class index is not an integer >= 1, or a
                (factor, class) pair appears twice.

        Args:
            df: The DataFrame containing one row per (factor, class).

        Returns:
            A new FactorTable instance.
        """
        _check_pandas_availability()

        required = {"factor", "class", "count"}
        missing = required - set(df.columns)
        if missing:
            raise ValueError(f"DataFrame must contain {sorted(required)} columns. Missing: {sorted(missing)}")

        def _cell(row, column):
            value = row.get(column, "")
            if pd.isna(value):
                return ""
            # numpy scalars -> plain Python so the table stays JSON-serializable
            return value.item() if isinstance(value, np.generic) else value

        def _class_index(value) -> int:
            try:
                number = float(value)
            except (TypeError, ValueError):
                raise ValueError(f"Class index {value!r} is not a number.")
            if not number.is_integer() or number < 1:
                raise ValueError(f"Class index {value!r} must be an integer >= 1.")
            return int(number)

        indices = [_class_index(v) for v in df["class"]]
        m = max(indices, default=0)

        factors = []
        for name, group in df.groupby("factor", sort=False):
            # Classes missing from the frame stay as empty bins at their rank
            bins = [ClassBin() for _ in range(m)]
            seen = set()
            for _, row in group.iterrows():
                k = _class_index(row["class"])
                if k in seen:
                    raise ValueError(f"Duplicate class {k} for factor '{name}'.")
                seen.add(k)
                bins[k - 1] = ClassBin(min=_cell(row, "min"), max=_cell(row, "max"), count=_cell(row, "count"))
            factors.append(Factor(str(name), bins))
        return cls(factors)

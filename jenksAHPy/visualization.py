from __future__ import annotations
import csv
import math
from typing import TYPE_CHECKING, List, Optional
import numpy as np

from .config import configure_parameters, EXPORT_DECIMALS

try:
    import matplotlib.pyplot as plt
    _PLOTTING_AVAILABLE = True
except ImportError:
    _PLOTTING_AVAILABLE = False

try:
    import pandas as pd
    _PANDAS_AVAILABLE = True
except ImportError:
    _PANDAS_AVAILABLE = False

if TYPE_CHECKING:
    from .types import AHPResult



def _check_pandas_availability():
    if not _PANDAS_AVAILABLE:
        raise ImportError("Table and export functionality requires the 'pandas' library. "
                          "Please install it using: pip install pandas openpyxl")

def _check_plotting_availability():
    if not _PLOTTING_AVAILABLE:
        raise ImportError("Plotting requires the 'matplotlib' library. "
                          "Please install it using: pip install matplotlib")


def format_export_number(value: float, decimals: int = EXPORT_DECIMALS) -> str:
    """
    Rounds to ``decimals`` places and prints the shortest form, so 1.0 -> "1",
    0.2 -> "0.2" and 1/3 -> "0.333333". Never uses scientific notation.
    """
    v = float(value)
    if math.isnan(v):
        return "NaN"
    if math.isinf(v):
        return "Infinity" if v > 0 else "-Infinity"
    text = f"{round(v, decimals):.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def _saaty_label(value: float) -> str:
    """'1/5' style label for reciprocal judgments, plain integer otherwise."""
    if value < 1:
        return f"1/{round(1 / value):d}"
    return f"{round(value):d}"


# ==============================================================================
# 1. TABLES
# ==============================================================================

def format_matrix_as_table(result: AHPResult, decimals: Optional[int] = None) -> 'pd.DataFrame':
    """
    Formats the comparison matrix into a classic n x n table.

    Args:
        result: The computed AHPResult.
        decimals (optional): Rounding for display. Defaults to
            ``configure_parameters.DISPLAY_DECIMALS`` (4).

    Returns:
        A pandas DataFrame indexed and labelled by factor name.
    """
    _check_pandas_availability()
    decimals = decimals if decimals is not None else configure_parameters.DISPLAY_DECIMALS
    return pd.DataFrame(np.round(result.matrix, decimals), index=result.names, columns=result.names)


def format_weights_as_table(result: AHPResult) -> 'pd.DataFrame':
    """Returns one row per factor with its class score and weight."""
    _check_pandas_availability()
    return pd.DataFrame({
        "Factor": result.names,
        "Score": [round(s.S, configure_parameters.SCORE_DECIMALS) for s in result.scores],
        "Weight": [round(float(w), configure_parameters.WEIGHT_DECIMALS) for w in result.weights],
    })


# ==============================================================================
# 2. CSV / EXCEL EXPORT
# ==============================================================================

def _write_csv(rows: List[List[str]], path: Optional[str]) -> str:
    df = pd.DataFrame(rows[1:], columns=rows[0])
    text = df.to_csv(index=False, quoting=csv.QUOTE_ALL, lineterminator="\n")
    if path is not None:
        with open(path, "w", encoding="utf-8", newline="") as fh:
            fh.write(text)
    return text


def matrix_to_csv(result: AHPResult, path: Optional[str] = None) -> str:
    """
    Serializes the comparison matrix as CSV.

    The header row is an empty cell followed by the factor names; each
    following row holds a factor name and its matrix row rounded to 6
    decimals. Every field is quoted.

    Args:
        result: The computed AHPResult.
        path (optional): If given, the CSV is also written to this file.

    Returns:
        The CSV text.
    """
    _check_pandas_availability()
    rows = [[""] + [str(name) for name in result.names]]
    for name, row in zip(result.names, result.matrix):
        rows.append([str(name)] + [format_export_number(v) for v in row])
    return _write_csv(rows, path)


def weights_to_csv(result: AHPResult, path: Optional[str] = None) -> str:
    """Serializes the weights as a quoted two-column (Factor, Weight) CSV."""
    _check_pandas_availability()
    rows = [["Factor", "Weight"]]
    for name, w in zip(result.names, result.weights):
        rows.append([str(name), format_export_number(w)])
    return _write_csv(rows, path)


def export_report(result: AHPResult, target: str, output_format: str = 'csv'):
    """
    Saves the matrix, weights and consistency figures.

    Args:
        result: The computed AHPResult.
        target: For 'csv', a base name; the files ``<target>_matrix.csv`` and
                ``<target>_weights.csv`` are written. For 'excel', the
                workbook path (``.xlsx`` is appended if missing).
        output_format (str, optional): 'csv' or 'excel'. Defaults to 'csv'.
    """
    _check_pandas_availability()

    if output_format.lower() == 'csv':
        _export_to_csv(result, target)
    elif output_format.lower() == 'excel':
        _export_to_excel(result, target)
    else:
        raise ValueError(f"Unsupported output_format: '{output_format}'. "
                         "Choose from 'csv' or 'excel'.")

def _export_to_csv(result: AHPResult, base_name: str):
    if base_name.endswith('.csv'): base_name = base_name[:-4]
    matrix_to_csv(result, f"{base_name}_matrix.csv")
    weights_to_csv(result, f"{base_name}_weights.csv")

def _export_to_excel(result: AHPResult, filename: str):
    if not filename.endswith('.xlsx'): filename += '.xlsx'
    stats = pd.DataFrame(
        {"Value": [result.lambda_max, result.ci, result.ri, result.cr]},
        index=["lambda_max", "CI", "RI", "CR"]
    )
    with pd.ExcelWriter(filename, engine='openpyxl') as writer:
        format_matrix_as_table(result, decimals=EXPORT_DECIMALS).to_excel(writer, sheet_name="Matrix")
        format_weights_as_table(result).to_excel(writer, sheet_name="Weights", index=False)
        stats.to_excel(writer, sheet_name="Consistency")


# ==============================================================================
# 3. TEXT REPORT
# ==============================================================================

def generate_report(result: AHPResult, filename: str | None = None) -> str:
    """
    Generates a plain-text report of class scores, the comparison matrix,
    the weights and the consistency figures.

    Args:
        result: The computed AHPResult.
        filename (optional): Path to save the report as a .txt file.

    Returns:
        The complete report as a string.
    """
    width = max([len(str(n)) for n in result.names] + [6])
    lines = ["=" * 60, "AHP FROM CLASS BREAKS", "=" * 60, ""]

    lines.append("Class scores (class 1 = best):")
    for s in result.scores:
        lines.append(f"  {s.name:<{width}}  S = {s.S:.{configure_parameters.SCORE_DECIMALS}f}  (total = {s.total:g})")
    if result.zero_total_factors:
        lines.append(f"  Warning: total count = 0 for {', '.join(result.zero_total_factors)}. "
                     "The matrix may be uninformative for these factors.")
    lines.append("")

    lines.append("Pairwise comparison matrix (Saaty 1-9):")
    header = " " * (width + 2) + "".join(f"{str(n)[:8]:>10}" for n in result.names)
    lines.append(header)
    for name, row in zip(result.names, result.matrix):
        cells = "".join(f"{v:>10.{configure_parameters.DISPLAY_DECIMALS}f}" for v in row)
        lines.append(f"  {name:<{width}}{cells}")
    lines.append("")

    lines.append("Weights:")
    for name, w in zip(result.names, result.weights):
        lines.append(f"  {name:<{width}}  {w:.{configure_parameters.WEIGHT_DECIMALS}f}")
    lines.append("")

    lines.append(f"lambda_max = {result.lambda_max:.6f}")
    lines.append(f"CI         = {result.ci:.6f}")
    lines.append(f"CR         = {result.cr:.6f}")
    lines.append(f"Status: {result.status_message()}")
    if not result.converged:
        lines.append(f"Note: power iteration stopped after {result.iterations} iterations without meeting the tolerance.")

    report = "\n".join(lines)
    if filename:
        with open(filename, "w", encoding="utf-8") as fh:
            fh.write(report)
    return report


# ==============================================================================
# 4. PLOTS
# ==============================================================================

def plot_weights(result: AHPResult, figsize=(10, 6)) -> 'plt.Figure':
    """
    Plots the factor weights as a bar chart.

    Args:
        result: The computed AHPResult.
        figsize: The size of the figure.

    Returns:
        The matplotlib Figure object.
    """
    _check_plotting_availability()

    labels = list(result.names)
    weights = [float(w) for w in result.weights]

    fig, ax = plt.subplots(figsize=figsize)
    bars = ax.bar(labels, weights, color=plt.cm.viridis(np.linspace(0, 1, max(len(labels), 1))))

    ax.set_ylabel('Weight')
    ax.set_title(f'Factor Weights (CR = {result.cr:.3f})')
    ax.set_xticks(range(len(labels)))
    ax.set_xticklabels(labels, rotation=45, ha="right")

    for bar in bars:
        yval = bar.get_height()
        ax.text(bar.get_x() + bar.get_width()/2.0, yval, f'{yval:.3f}', va='bottom', ha='center')

    fig.tight_layout()
    return fig


def plot_comparison_matrix(result: AHPResult, figsize=(8, 6)) -> 'plt.Figure':
    """
    Draws the comparison matrix as a heatmap on a log scale, so that a
    judgment and its reciprocal get symmetric colours.
    """
    _check_plotting_availability()

    matrix = np.asarray(result.matrix, dtype=float)
    n = matrix.shape[0]

    fig, ax = plt.subplots(figsize=figsize)
    image = ax.imshow(np.log(matrix), cmap='RdYlGn', vmin=-np.log(9), vmax=np.log(9))

    ax.set_xticks(range(n))
    ax.set_yticks(range(n))
    ax.set_xticklabels(result.names, rotation=45, ha="right")
    ax.set_yticklabels(result.names)
    for i in range(n):
        for j in range(n):
            ax.text(j, i, _saaty_label(matrix[i, j]), ha='center', va='center')

    ax.set_title('Pairwise Comparison Matrix (Saaty scale)')
    fig.colorbar(image, ax=ax, label='ln(a_ij)')
    fig.tight_layout()
    return fig

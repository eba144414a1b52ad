import math
import numbers
import zipfile
from pathlib import Path
from typing import Optional, Union

import pandas as pd
import torch

from .errors import InputShapeError
from .sa import AnnealingResult

EXCEL_SUFFIXES = (".xlsx", ".xlsm")


def _is_number(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return not pd.isna(value) and math.isfinite(value)


def read_points(path: Union[str, Path]) -> torch.Tensor:
    """
    Load a point set, one point per row and one coordinate per column.

    Excel files are read from their first sheet; CSV files are read as-is.
    Neither format has a header row.

    Args:
        path: .xlsx, .xlsm or .csv file

    Returns:
        Tensor [n, d] of float64 coordinates

    Raises:
        InputShapeError: On unreadable workbooks, empty sheets, ragged rows
            or cells that are not finite numbers
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix in EXCEL_SUFFIXES:
        try:
            df = pd.read_excel(path, sheet_name=0, header=None)
        except (ValueError, zipfile.BadZipFile) as exc:
            raise InputShapeError(f"Cannot read workbook {path}: {exc}")
    elif suffix == ".csv":
        try:
            df = pd.read_csv(path, header=None)
        except pd.errors.EmptyDataError:
            raise InputShapeError(f"No points found in {path}")
        except pd.errors.ParserError as exc:
            raise InputShapeError(f"Rows of {path} have different lengths: {exc}")
    else:
        raise InputShapeError(f"Unsupported point file format: {path.suffix!r}")

    if df.empty:
        raise InputShapeError(f"No points found in {path}")

    cells = df.to_numpy(dtype=object)
    for row, values in enumerate(cells, start=1):
        for col, value in enumerate(values, start=1):
            if not _is_number(value):
                raise InputShapeError(
                    f"Invalid value in data sheet at row {row}, column {col}: {value!r}"
                )
    return torch.tensor(cells.astype(float), dtype=torch.float64)


def format_report(result: AnnealingResult, elapsed: Optional[float] = None) -> str:
    """
    Render the iteration trace and the final tour as text.

    Args:
        result: Outcome of a run
        elapsed: Total wall-clock seconds to report, result.elapsed if omitted

    Returns:
        Report text, one block per iteration then the tour, its length and
        the elapsed time
    """
    lines = []
    for entry in result.trace:
        lines.append(f"{entry.iteration} times iterations.")
        lines.append(f"ΔE={entry.delta}, T={entry.temperature}")
        lines.append(f"Probability of accept = {entry.probability}")
        lines.append(
            "Accept new solution." if entry.accepted else "Reject new solution."
        )
        lines.append("")
    lines.append(" ".join(str(node) for node in result.tour.tolist()))
    lines.append(f"Path length = {result.cost}")
    lines.append(f"Cost time = {result.elapsed if elapsed is None else elapsed:.6f}s")
    return "\n".join(lines) + "\n"


def write_result(path: Union[str, Path], report: str) -> None:
    """Create or truncate the output file and write the report to it."""
    Path(path).write_text(report, encoding="utf-8")

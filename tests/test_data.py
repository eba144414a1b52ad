import pandas as pd
import pytest
import torch

from tsp_annealing import InputShapeError, solve
from tsp_annealing.data import format_report, read_points, write_result

from conftest import UNIT_SQUARE, make_config


def test_read_csv(tmp_path):
    path = tmp_path / "points.csv"
    path.write_text("0,0\n0,1\n1,1\n1,0\n")
    points = read_points(path)
    assert points.dtype == torch.float64
    assert points.tolist() == UNIT_SQUARE


def test_read_xlsx(tmp_path):
    path = tmp_path / "points.xlsx"
    pd.DataFrame([[0, 0.5, 2], [1, 1.5, 3]]).to_excel(path, header=False, index=False)
    points = read_points(path)
    assert points.tolist() == [[0.0, 0.5, 2.0], [1.0, 1.5, 3.0]]


def test_xlsx_with_text_cell(tmp_path):
    path = tmp_path / "points.xlsx"
    pd.DataFrame([[0, 1], [1, "x"]]).to_excel(path, header=False, index=False)
    with pytest.raises(InputShapeError, match="row 2, column 2"):
        read_points(path)


def test_xlsx_with_ragged_rows(tmp_path):
    path = tmp_path / "points.xlsx"
    pd.DataFrame([[0, 1, 2], [1, 2, None]]).to_excel(path, header=False, index=False)
    with pytest.raises(InputShapeError):
        read_points(path)


@pytest.mark.parametrize(
    "content",
    ["0,0\n1\n", "0\n1,1\n", "", "a,b\n1,2\n", "0,0\ninf,1\n1,1\n"],
)
def test_malformed_csv(tmp_path, content):
    path = tmp_path / "points.csv"
    path.write_text(content)
    with pytest.raises(InputShapeError):
        read_points(path)


def test_corrupt_workbook(tmp_path):
    path = tmp_path / "points.xlsx"
    path.write_text("not a workbook")
    with pytest.raises(InputShapeError, match="Cannot read workbook"):
        read_points(path)


def test_unsupported_format(tmp_path):
    with pytest.raises(InputShapeError):
        read_points(tmp_path / "points.json")


def test_report_layout(unit_square):
    result = solve(unit_square, make_config(max_iterations=3))
    report = format_report(result, elapsed=0.25)
    lines = report.splitlines()

    assert lines[0] == "1 times iterations."
    assert lines[1].startswith("ΔE=")
    assert ", T=100.0" in lines[1]
    assert lines[2].startswith("Probability of accept = ")
    assert lines[3] in ("Accept new solution.", "Reject new solution.")
    assert lines[4] == ""
    assert lines[5] == "2 times iterations."
    assert lines[-3] == " ".join(str(node) for node in result.tour.tolist())
    assert lines[-2] == f"Path length = {result.cost}"
    assert lines[-1] == "Cost time = 0.250000s"


def test_write_result_truncates(tmp_path):
    path = tmp_path / "out.txt"
    path.write_text("old content that is longer than the new one")
    write_result(path, "new\n")
    assert path.read_text(encoding="utf-8") == "new\n"

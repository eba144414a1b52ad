from typing import Sequence, Union

import numpy as np
import torch

from .errors import InputShapeError

Points = Union[torch.Tensor, np.ndarray, Sequence[Sequence[float]]]


def as_points(points: Points) -> torch.Tensor:
    """
    Convert an ordered point set into a float64 tensor of shape [n, d].

    Args:
        points: Tensor, ndarray or sequence of coordinate rows

    Returns:
        Tensor [n, d] of coordinates

    Raises:
        InputShapeError: If rows differ in dimensionality, the set is empty
            or a coordinate is not a finite number
    """
    if isinstance(points, torch.Tensor):
        coords = points.detach().to(torch.float64)
    else:
        try:
            rows = [list(row) for row in points]
        except TypeError as exc:
            raise InputShapeError(f"Points must be rows of coordinates: {exc}")
        if not rows:
            raise InputShapeError("Point set is empty.")
        dims = {len(row) for row in rows}
        if len(dims) != 1:
            raise InputShapeError(
                f"Points have inconsistent dimensionality: {sorted(dims)}"
            )
        try:
            coords = torch.tensor(rows, dtype=torch.float64)
        except (TypeError, ValueError) as exc:
            raise InputShapeError(f"Non-numeric coordinate in point set: {exc}")

    if coords.dim() != 2:
        raise InputShapeError(
            f"Point set must be 2-dimensional [n, d], got shape {tuple(coords.shape)}"
        )
    if coords.size(0) == 0 or coords.size(1) == 0:
        raise InputShapeError("Point set needs at least one point of dimension >= 1.")
    if not torch.isfinite(coords).all():
        raise InputShapeError("Point set contains NaN or infinite coordinates.")
    return coords


def calculate_distance_matrix(points: Points) -> torch.Tensor:
    """
    points: [N, D] → Euclidean distances [N, N]
    """
    coords = as_points(points)
    matrix = torch.cdist(
        coords.unsqueeze(0),
        coords.unsqueeze(0),
        p=2,
        compute_mode="donot_use_mm_for_euclid_dist",
    ).squeeze(0)
    # Mirror the upper triangle so symmetry is exact
    upper = torch.triu(matrix, diagonal=1)
    return upper + upper.T

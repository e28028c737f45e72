"""Normalization and validation of triangle index buffers."""

import numbers
from typing import Sequence

import numpy as np
import torch

from torchhex.validation._errors import InvalidMeshError


def as_triangle_cells(
    indices: Sequence[int] | np.ndarray | torch.Tensor,
    n_points: int,
) -> torch.Tensor:
    """Convert a triangle index buffer to validated (n_cells, 3) connectivity.

    Args:
        indices: Flat buffer of length 3 * n_cells, where each consecutive
            triple is one triangle, or connectivity already shaped (n_cells, 3).
            May be a Python sequence, a NumPy array or a torch tensor; tensors
            stay on their device.
        n_points: Number of points the indices refer to.

    Returns:
        Tensor of shape (n_cells, 3), dtype int64. The input is never modified.

    Raises:
        TypeError: If indices are not integer-valued or n_points is not an int.
        InvalidMeshError: If the buffer length is not a multiple of 3, an index
            is out of [0, n_points), or a triangle repeats a vertex.
    """
    if isinstance(n_points, bool) or not isinstance(n_points, numbers.Integral):
        raise TypeError(f"`n_points` must be an int, but got {type(n_points)=}.")
    n_points = int(n_points)
    if n_points < 0:
        raise InvalidMeshError(f"`n_points` must be non-negative, but got {n_points=}.")

    ### Bring the buffer into torch
    if isinstance(indices, torch.Tensor):
        buffer = indices
    else:
        array = np.asarray(indices)
        if array.size == 0:
            array = array.astype(np.int64)
        elif not np.issubdtype(array.dtype, np.integer):
            raise TypeError(
                f"Triangle indices must have an int-like dtype, but got {array.dtype=}."
            )
        buffer = torch.from_numpy(array.astype(np.int64))

    if buffer.dtype == torch.bool or torch.is_floating_point(buffer) or torch.is_complex(buffer):
        if buffer.numel() > 0:
            raise TypeError(
                f"Triangle indices must have an int-like dtype, but got {buffer.dtype=}."
            )

    ### Validate shape
    if buffer.ndim == 1:
        if buffer.numel() % 3 != 0:
            raise InvalidMeshError(
                f"Index buffer length must be a multiple of 3, but got {buffer.numel()=}."
            )
        cells = buffer.reshape(-1, 3)
    elif buffer.ndim == 2 and buffer.shape[1] == 3:
        cells = buffer
    else:
        raise InvalidMeshError(
            f"Triangle indices must have shape (3 * n_cells,) or (n_cells, 3), "
            f"but got {tuple(buffer.shape)=}."
        )
    cells = cells.to(torch.int64)

    if len(cells) == 0:
        return cells

    ### Validate index range
    min_index = cells.min().item()
    max_index = cells.max().item()
    if min_index < 0:
        raise InvalidMeshError(f"Triangle indices must be non-negative, but got {min_index=}.")
    if max_index >= n_points:
        raise InvalidMeshError(
            f"Triangle index out of range: {max_index=} but {n_points=}. "
            f"Every index must be < n_points."
        )

    ### Reject degenerate triangles
    degenerate = (
        (cells[:, 0] == cells[:, 1])
        | (cells[:, 1] == cells[:, 2])
        | (cells[:, 2] == cells[:, 0])
    )
    if degenerate.any():
        cell_idx = int(torch.nonzero(degenerate)[0, 0].item())
        raise InvalidMeshError(
            f"Triangle {cell_idx} repeats a vertex: {cells[cell_idx].tolist()}. "
            f"Found {int(degenerate.sum().item())} degenerate triangles."
        )

    return cells

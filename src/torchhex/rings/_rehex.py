"""Order the neighbors of every vertex of a closed triangle mesh into rings.

For a subdivided icosahedron, each vertex is the center of a hexagonal tile
(pentagonal at the twelve original corners). Consider the hexagon:

      a---b
     /     \\
    f   i   c
     \\     /
      e---d

The ring of ``i`` is some rotation of ``[a, b, c, d, e, f]``: consecutive
entries, and the last and first, share a triangle with ``i``.

The computation runs in two phases. Phase 1 collects the unordered neighbor
set of each vertex and the triangles incident to it. Phase 2 turns each
incident triangle (i, b, c) into a fan wedge b -> c, links every wedge to the
wedge starting where it ends, and walks those links. All vertices are walked
together, one step per iteration, so the number of iterations is the largest
vertex degree rather than the number of vertices.
"""

import logging
from typing import Iterable, Sequence

import numpy as np
import torch

from torchhex.neighbors import (
    Adjacency,
    get_point_to_cells_adjacency,
    get_point_to_points_adjacency,
)
from torchhex.validation import (
    NonManifoldMeshError,
    as_triangle_cells,
    validate_closed_manifold,
)

logger = logging.getLogger(__name__)


def rehex(
    indices: Sequence[int] | np.ndarray | torch.Tensor,
    n_points: int,
    *,
    allowed_degrees: Iterable[int] | None = (5, 6),
    check_manifold: bool = True,
) -> Adjacency:
    """Turn an icosphere triangle index buffer into per-vertex neighbor rings.

    Args:
        indices: Flat triangle index buffer (each consecutive triple is one
            triangle) or connectivity shaped (n_cells, 3). Sequences and NumPy
            arrays are accepted; tensors are processed on their own device.
        n_points: Number of vertices. Vertices that no triangle references get
            an empty ring.
        allowed_degrees: Degrees a referenced vertex may have. The default
            (5, 6) matches icospheres at every subdivision level. Pass None to
            accept any closed manifold.
        check_manifold: If True, check edge multiplicities and winding before
            walking, which gives more specific error messages. Rings are
            verified to close during the walk either way.

    Returns:
        Adjacency with n_points lists. List ``v`` is the ring of neighbors of
        ``v``: no duplicates, each consecutive pair (including last -> first)
        shares a triangle with ``v``. Winding is preserved: if triangle
        (v, b, c) is in the buffer, c directly follows b in the ring of v. Each
        ring starts at its smallest neighbor id.

    Raises:
        TypeError: If indices are not integer-valued.
        InvalidMeshError: If the buffer is malformed (see as_triangle_cells).
        NonManifoldMeshError: If the mesh is not a closed, consistently wound
            manifold, or a vertex degree is not in allowed_degrees.

    Example:
        >>> # Octahedron: every vertex has 4 neighbors
        >>> indices = [0, 2, 4, 2, 1, 4, 1, 3, 4, 3, 0, 4,
        ...            2, 0, 5, 1, 2, 5, 3, 1, 5, 0, 3, 5]
        >>> rehex(indices, 6, allowed_degrees=None).to_list()[4]
        [0, 2, 1, 3]
    """
    cells = as_triangle_cells(indices, n_points)
    n_points = int(n_points)
    device = cells.device
    logger.debug(
        "Building rings for %d points from %d triangles on %s", n_points, len(cells), device
    )

    if check_manifold:
        validate_closed_manifold(cells)

    ### Phase 1: unordered neighbor sets and triangle incidence
    point_neighbors = get_point_to_points_adjacency(cells, n_points)
    point_cells = get_point_to_cells_adjacency(cells, n_points)
    degrees = point_neighbors.counts

    # Around a closed disk fan, triangles and neighbors are equal in number
    fan_mismatch = point_cells.counts != degrees
    if fan_mismatch.any():
        vertex = int(torch.nonzero(fan_mismatch)[0, 0].item())
        raise NonManifoldMeshError(
            f"Vertex {vertex} is in {int(point_cells.counts[vertex].item())} triangles "
            f"but has {int(degrees[vertex].item())} neighbors; its triangles do not "
            f"form a single closed fan."
        )

    if point_cells.n_total_neighbors == 0:
        return Adjacency(
            offsets=point_neighbors.offsets.clone(),
            indices=point_neighbors.indices.clone(),
        )

    ### Phase 2: build one fan wedge per (vertex, incident triangle)
    wedge_centers = torch.repeat_interleave(
        torch.arange(n_points, dtype=torch.int64, device=device), point_cells.counts
    )
    wedge_cells = cells[point_cells.indices]  # (n_wedges, 3)
    corner = (wedge_cells == wedge_centers.unsqueeze(1)).int().argmax(dim=1)
    rows = torch.arange(len(wedge_cells), device=device)
    wedge_src = wedge_cells[rows, (corner + 1) % 3]
    wedge_dst = wedge_cells[rows, (corner + 2) % 3]

    ### Sort wedges by (center, src); groups stay in point_cells order
    key_stride = n_points + 1
    wedge_keys = wedge_centers * key_stride + wedge_src
    order = torch.argsort(wedge_keys)
    wedge_keys = wedge_keys[order]
    wedge_centers = wedge_centers[order]
    wedge_src = wedge_src[order]
    wedge_dst = wedge_dst[order]

    # Sorted wedge sources must be exactly the neighbor sets
    if not torch.equal(wedge_src, point_neighbors.indices):
        position = int(torch.nonzero(wedge_src != point_neighbors.indices)[0, 0].item())
        vertex = int(wedge_centers[position].item())
        raise NonManifoldMeshError(
            f"Triangles around vertex {vertex} traverse an edge twice in the same "
            f"direction; triangle winding is inconsistent."
        )

    ### Link each wedge to the wedge that starts at its dst
    # dst is always a neighbor of the center, so every lookup hits a wedge
    successors = torch.searchsorted(wedge_keys, wedge_centers * key_stride + wedge_dst)

    ### Walk all rings in lock-step
    starts = point_cells.offsets[:-1]
    has_ring = degrees > 0
    max_degree = int(degrees.max().item())

    origin = torch.where(has_ring, starts, torch.zeros_like(starts))
    cursor = origin.clone()
    ring_slots = torch.empty((n_points, max_degree), dtype=torch.int64, device=device)
    closed_early = torch.zeros(n_points, dtype=torch.bool, device=device)
    left_open = torch.zeros(n_points, dtype=torch.bool, device=device)

    for step in range(1, max_degree + 1):
        ring_slots[:, step - 1] = cursor
        cursor = successors[cursor]
        at_origin = cursor == origin
        closed_early |= at_origin & (step < degrees)
        left_open |= (step == degrees) & ~at_origin

    is_broken = has_ring & (closed_early | left_open)
    if is_broken.any():
        vertex = int(torch.nonzero(is_broken)[0, 0].item())
        raise NonManifoldMeshError(
            f"Triangle fan around vertex {vertex} does not close into a single ring "
            f"of {int(degrees[vertex].item())} neighbors."
        )

    _check_degrees(degrees, allowed_degrees)

    ### Gather ring entries in vertex-major order
    in_ring = torch.arange(max_degree, device=device).unsqueeze(0) < degrees.unsqueeze(1)
    ring_indices = wedge_src[ring_slots[in_ring]]

    if logger.isEnabledFor(logging.DEBUG):
        histogram = torch.bincount(degrees).tolist()
        logger.debug(
            "Ring degree histogram: %s",
            {degree: count for degree, count in enumerate(histogram) if count},
        )

    return Adjacency(
        offsets=point_neighbors.offsets.clone(),
        indices=ring_indices,
    )


def _check_degrees(degrees: torch.Tensor, allowed_degrees: Iterable[int] | None) -> None:
    """Raise if a referenced vertex has a degree outside allowed_degrees."""
    if allowed_degrees is None:
        return

    allowed = torch.tensor(sorted(set(allowed_degrees)), dtype=torch.int64, device=degrees.device)
    is_bad = (degrees > 0) & ~torch.isin(degrees, allowed)
    if is_bad.any():
        vertex = int(torch.nonzero(is_bad)[0, 0].item())
        raise NonManifoldMeshError(
            f"Vertex {vertex} has {int(degrees[vertex].item())} neighbors, but only "
            f"{allowed.tolist()} are allowed. Found {int(is_bad.sum().item())} such vertices. "
            f"Pass allowed_degrees=None to accept any closed manifold."
        )

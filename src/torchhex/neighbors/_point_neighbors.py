"""Compute point-based adjacency relationships in triangle meshes.

This module provides functions to compute:
- Point-to-cells adjacency (star of each vertex)
- Point-to-points adjacency (graph edges)

Both take connectivity plus an explicit point count, so points that no
triangle references still get an (empty) entry.
"""

import torch

from torchhex.kernels.edge_extraction import extract_candidate_edges
from torchhex.neighbors._adjacency import Adjacency, build_adjacency_from_pairs


def get_point_to_cells_adjacency(cells: torch.Tensor, n_points: int) -> Adjacency:
    """Compute the star of each vertex (all cells containing each point).

    Args:
        cells: Triangle connectivity, shape (n_cells, 3), int64.
        n_points: Number of points in the mesh.

    Returns:
        Adjacency where adjacency.to_list()[i] contains all cell indices that
        contain point i, in ascending order. Isolated points have empty lists.

    Example:
        >>> cells = torch.tensor([[0, 1, 2], [1, 3, 2]])
        >>> get_point_to_cells_adjacency(cells, n_points=5).to_list()
        [[0], [0, 1], [0, 1], [1], []]
    """
    n_cells, n_vertices_per_cell = cells.shape

    ### Create (point_id, cell_id) pairs for all vertices in all cells
    # Shape: (n_cells * n_vertices_per_cell,)
    point_ids = cells.reshape(-1)
    cell_ids = torch.arange(
        n_cells, dtype=torch.int64, device=cells.device
    ).repeat_interleave(n_vertices_per_cell)

    return build_adjacency_from_pairs(point_ids, cell_ids, n_sources=n_points)


def get_point_to_points_adjacency(cells: torch.Tensor, n_points: int) -> Adjacency:
    """Compute point-to-point adjacency (graph edges of the mesh).

    For each point, finds all other points connected to it by an edge. Each
    neighbor appears once, however many triangles share the edge, and lists
    are sorted ascending. The relation is symmetric.

    Args:
        cells: Triangle connectivity, shape (n_cells, 3), int64.
        n_points: Number of points in the mesh.

    Returns:
        Adjacency where adjacency.to_list()[i] contains all point indices that
        share an edge with point i. Isolated points have empty lists.

    Example:
        >>> cells = torch.tensor([[0, 1, 2]])
        >>> get_point_to_points_adjacency(cells, n_points=3).to_list()
        [[1, 2], [0, 2], [0, 1]]
    """
    ### Handle empty mesh
    if len(cells) == 0:
        return Adjacency(
            offsets=torch.zeros(n_points + 1, dtype=torch.int64, device=cells.device),
            indices=torch.zeros(0, dtype=torch.int64, device=cells.device),
        )

    ### Extract edges in canonical (sorted) form, then deduplicate
    # Shape: (n_unique_edges, 2)
    candidate_edges, _ = extract_candidate_edges(cells)
    unique_edges = torch.unique(candidate_edges, dim=0)

    ### Create bidirectional edges
    # For each edge [a, b], create both [a, b] and [b, a]
    # Shape: (2 * n_unique_edges, 2)
    bidirectional_edges = torch.cat([unique_edges, unique_edges.flip(dims=[1])], dim=0)

    return build_adjacency_from_pairs(
        bidirectional_edges[:, 0],
        bidirectional_edges[:, 1],
        n_sources=n_points,
    )

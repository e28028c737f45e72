"""Closed-manifold checks for triangle meshes.

A triangle mesh is a closed, consistently wound 2-manifold when every
undirected edge is shared by exactly two triangles and those two triangles
traverse it in opposite directions. Edges appearing once are boundary edges;
edges appearing more than twice are non-manifold.
"""

import torch

from torchhex.kernels.edge_extraction import extract_candidate_edges
from torchhex.validation._errors import NonManifoldMeshError


def get_edge_face_counts(
    cells: torch.Tensor,  # shape: (n_cells, 3)
) -> tuple[torch.Tensor, torch.Tensor]:
    """Count how many triangles use each undirected edge.

    Args:
        cells: Triangle connectivity, shape (n_cells, 3)

    Returns:
        Tuple of (unique_edges, counts):
        - unique_edges: Sorted unique edges, shape (n_edges, 2)
        - counts: Number of triangles containing each edge, shape (n_edges,)

    Example:
        >>> # Two triangles sharing edge [1, 2]
        >>> cells = torch.tensor([[0, 1, 2], [1, 3, 2]])
        >>> edges, counts = get_edge_face_counts(cells)
        >>> edges.tolist()
        [[0, 1], [0, 2], [1, 2], [1, 3], [2, 3]]
        >>> counts.tolist()
        [1, 1, 2, 1, 1]
    """
    if len(cells) == 0:
        return (
            torch.zeros((0, 2), dtype=torch.int64, device=cells.device),
            torch.zeros(0, dtype=torch.int64, device=cells.device),
        )

    candidate_edges, _ = extract_candidate_edges(cells)
    unique_edges, counts = torch.unique(candidate_edges, dim=0, return_counts=True)

    return unique_edges, counts


def validate_closed_manifold(cells: torch.Tensor) -> None:
    """Check that triangles form a closed, consistently wound 2-manifold.

    Args:
        cells: Triangle connectivity, shape (n_cells, 3)

    Raises:
        NonManifoldMeshError: If an edge is on an open boundary, is shared by
            more than two triangles, or is traversed twice in the same direction.

    Note:
        This is an edge-level check. A vertex where two fans touch at a single
        point passes it; rehex detects that case while walking rings.
    """
    if len(cells) == 0:
        return

    ### Every undirected edge must be shared by exactly two triangles
    unique_edges, counts = get_edge_face_counts(cells)
    is_bad_edge = counts != 2
    if is_bad_edge.any():
        edge_idx = int(torch.nonzero(is_bad_edge)[0, 0].item())
        edge = unique_edges[edge_idx].tolist()
        count = int(counts[edge_idx].item())
        kind = "open boundary" if count == 1 else "non-manifold"
        raise NonManifoldMeshError(
            f"Edge {edge} is shared by {count} triangles ({kind}); a closed manifold "
            f"requires exactly 2. Found {int(is_bad_edge.sum().item())} such edges."
        )

    ### Every directed edge must appear once, i.e. neighbors wind oppositely
    directed_edges, _ = extract_candidate_edges(cells, directed=True)
    unique_directed, directed_counts = torch.unique(
        directed_edges, dim=0, return_counts=True
    )
    is_repeated = directed_counts > 1
    if is_repeated.any():
        edge_idx = int(torch.nonzero(is_repeated)[0, 0].item())
        edge = unique_directed[edge_idx].tolist()
        raise NonManifoldMeshError(
            f"Directed edge {edge} is traversed by {int(directed_counts[edge_idx].item())} "
            f"triangles in the same direction; triangle winding is inconsistent."
        )

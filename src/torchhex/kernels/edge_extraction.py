"""Edge extraction for triangle meshes.

Every triangle (a, b, c) contributes three candidate edges, (a, b), (b, c) and
(c, a). Shared edges appear once per triangle that contains them, so the output
contains duplicates; callers deduplicate with torch.unique as needed.
"""

import torch


def extract_candidate_edges(
    cells: torch.Tensor,  # shape: (n_cells, 3)
    directed: bool = False,
) -> tuple[torch.Tensor, torch.Tensor]:
    """Extract all candidate edges from a triangle mesh.

    Args:
        cells: Triangle connectivity, shape (n_cells, 3)
        directed: If True, edges keep the triangle's winding order, so a closed
            and consistently wound mesh contains every directed edge exactly
            once. If False, the two vertices of each edge are sorted to
            canonical form for deduplication.

    Returns:
        candidate_edges: All edges with duplicates, shape (n_cells * 3, 2)
        parent_cell_indices: Parent cell index for each edge, shape (n_cells * 3,)

    Example:
        >>> cells = torch.tensor([[0, 2, 1]])
        >>> edges, parents = extract_candidate_edges(cells, directed=True)
        >>> edges.tolist()
        [[0, 2], [2, 1], [1, 0]]
        >>> extract_candidate_edges(cells)[0].tolist()
        [[0, 2], [1, 2], [0, 1]]
    """
    n_cells, n_vertices_per_cell = cells.shape

    ### Pair each corner with the next corner in winding order
    # Shape: (n_cells, 3, 2)
    candidate_edges = torch.stack([cells, cells.roll(-1, dims=1)], dim=-1)

    if not directed:
        candidate_edges = torch.sort(candidate_edges, dim=-1)[0]

    candidate_edges = candidate_edges.reshape(-1, 2)

    ### Each cell contributes n_vertices_per_cell edges
    parent_cell_indices = torch.arange(
        n_cells,
        device=cells.device,
        dtype=torch.int64,
    ).repeat_interleave(n_vertices_per_cell)

    return candidate_edges, parent_cell_indices

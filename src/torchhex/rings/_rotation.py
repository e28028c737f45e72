"""Utilities for ring adjacencies.

A ring has no distinguished first element, so two ring adjacencies describe
the same tiling when each pair of rings agrees up to rotation. These helpers
put rings into a canonical rotation and enumerate their consecutive pairs.
"""

import torch

from torchhex.neighbors import Adjacency


def _ring_positions(adjacency: Adjacency) -> tuple[torch.Tensor, torch.Tensor]:
    """Return (source_ids, position within ring) for every entry of indices."""
    device = adjacency.offsets.device
    source_ids = torch.repeat_interleave(
        torch.arange(adjacency.n_sources, device=device), adjacency.counts
    )
    positions = (
        torch.arange(adjacency.n_total_neighbors, device=device)
        - adjacency.offsets[:-1][source_ids]
    )
    return source_ids, positions


def canonicalize_ring_rotation(adjacency: Adjacency) -> Adjacency:
    """Rotate every ring so that it starts at its smallest entry.

    Ring direction is kept. Two ring adjacencies are equal up to rotation of
    each ring exactly when their canonical forms are equal.

    Args:
        adjacency: Ring adjacency, e.g. from rehex.

    Returns:
        New Adjacency with the same offsets and rotated rings.

    Example:
        >>> adj = Adjacency(
        ...     offsets=torch.tensor([0, 3, 3, 5]),
        ...     indices=torch.tensor([4, 1, 7, 9, 2]),
        ... )
        >>> canonicalize_ring_rotation(adj).to_list()
        [[1, 7, 4], [], [2, 9]]
    """
    if adjacency.n_total_neighbors == 0:
        return Adjacency(
            offsets=adjacency.offsets.clone(),
            indices=adjacency.indices.clone(),
        )

    indices = adjacency.indices
    counts = adjacency.counts
    source_ids, positions = _ring_positions(adjacency)
    sentinel = torch.iinfo(torch.int64).max

    ### Smallest value of each ring
    ring_min = torch.full(
        (adjacency.n_sources,), sentinel, dtype=torch.int64, device=indices.device
    ).scatter_reduce(0, source_ids, indices.to(torch.int64), reduce="amin")

    ### First position holding that value
    is_min = indices == ring_min[source_ids]
    min_position = torch.full(
        (adjacency.n_sources,), sentinel, dtype=torch.int64, device=indices.device
    ).scatter_reduce(0, source_ids[is_min], positions[is_min], reduce="amin")

    ### Read each ring starting from its minimum
    rotated_positions = (positions + min_position[source_ids]) % counts[source_ids]
    rotated = indices[adjacency.offsets[:-1][source_ids] + rotated_positions]

    return Adjacency(offsets=adjacency.offsets.clone(), indices=rotated)


def ring_edges(adjacency: Adjacency) -> tuple[torch.Tensor, torch.Tensor]:
    """List the consecutive pairs of every ring, including the wrap-around pair.

    For a ring adjacency from rehex, each returned triple
    (center, pair[0], pair[1]) is a triangle of the input mesh, up to rotation
    of its corners and with the input's winding.

    Args:
        adjacency: Ring adjacency.

    Returns:
        Tuple of (centers, pairs):
        - centers: Source of each pair, shape (n_total_neighbors,)
        - pairs: (ring[i], ring[i + 1]) with wrap-around, shape (n_total_neighbors, 2)

    Example:
        >>> adj = Adjacency(
        ...     offsets=torch.tensor([0, 3, 3]),
        ...     indices=torch.tensor([1, 2, 3]),
        ... )
        >>> centers, pairs = ring_edges(adj)
        >>> centers.tolist(), pairs.tolist()
        ([0, 0, 0], [[1, 2], [2, 3], [3, 1]])
    """
    source_ids, positions = _ring_positions(adjacency)
    next_positions = (positions + 1) % adjacency.counts[source_ids]
    next_indices = adjacency.indices[adjacency.offsets[:-1][source_ids] + next_positions]

    pairs = torch.stack([adjacency.indices, next_indices], dim=1)
    return source_ids, pairs

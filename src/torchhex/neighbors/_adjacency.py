"""Core data structure for storing ragged adjacency relationships in meshes.

This module provides the Adjacency tensorclass for representing ragged arrays
using offset-indices encoding, commonly used in graph and mesh processing.
"""

import torch
from tensordict import tensorclass


@tensorclass
class Adjacency:
    """Ragged adjacency list stored with offset-indices encoding.

    This structure efficiently represents variable-length neighbor lists using two
    arrays: offsets and indices. This is a standard format for sparse graph data
    structures and enables GPU-compatible operations on ragged data.

    Attributes:
        offsets: Indices into the indices array marking the start of each neighbor list.
            Shape (n_sources + 1,), dtype int64. The i-th source's neighbors are
            indices[offsets[i]:offsets[i+1]].
        indices: Flattened array of all neighbor indices.
            Shape (total_neighbors,), dtype int64.

    Example:
        >>> # Represent [[0,1,2], [3,4], [5], [6,7,8]]
        >>> adj = Adjacency(
        ...     offsets=torch.tensor([0, 3, 5, 6, 9]),
        ...     indices=torch.tensor([0, 1, 2, 3, 4, 5, 6, 7, 8]),
        ... )
        >>> adj.to_list()
        [[0, 1, 2], [3, 4], [5], [6, 7, 8]]

        >>> # Empty neighbor list for source 1
        >>> adj = Adjacency(
        ...     offsets=torch.tensor([0, 2, 2, 4]),
        ...     indices=torch.tensor([10, 11, 12, 13]),
        ... )
        >>> adj.to_list()
        [[10, 11], [], [12, 13]]
    """

    offsets: torch.Tensor  # shape: (n_sources + 1,), dtype: int64
    indices: torch.Tensor  # shape: (total_neighbors,), dtype: int64

    def __post_init__(self):
        if not torch.compiler.is_compiling():
            ### Validate offsets is non-empty
            # Offsets must have length (n_sources + 1), so minimum length is 1 (for n_sources=0)
            if len(self.offsets) < 1:
                raise ValueError(
                    f"Offsets array must have length >= 1 (n_sources + 1), but got {len(self.offsets)=}. "
                    f"Even for 0 sources, offsets should be [0]."
                )

            ### Validate offsets starts at 0
            if self.offsets[0].item() != 0:
                raise ValueError(
                    f"First offset must be 0, but got {self.offsets[0].item()=}. "
                    f"The offset-indices encoding requires offsets[0] == 0."
                )

            ### Validate last offset equals length of indices
            last_offset = self.offsets[-1].item()
            indices_length = len(self.indices)
            if last_offset != indices_length:
                raise ValueError(
                    f"Last offset must equal length of indices, but got "
                    f"{last_offset=} != {indices_length=}. "
                    f"The offset-indices encoding requires offsets[-1] == len(indices)."
                )

    def to_list(self) -> list[list[int]]:
        """Convert adjacency to a ragged list-of-lists representation.

        The order of neighbors within each sublist is preserved (not sorted), so
        for ring adjacencies each sublist is the ring in walking order.

        Returns:
            Ragged list where result[i] contains all neighbors of source i.
            Empty sublists represent sources with no neighbors.

        Example:
            >>> adj = Adjacency(
            ...     offsets=torch.tensor([0, 3, 3, 5]),
            ...     indices=torch.tensor([1, 2, 0, 4, 3]),
            ... )
            >>> adj.to_list()
            [[1, 2, 0], [], [4, 3]]
        """
        ### Convert to CPU numpy for Python list operations
        offsets_np = self.offsets.cpu().numpy()
        indices_np = self.indices.cpu().numpy()

        ### Build ragged list structure
        n_sources = len(offsets_np) - 1
        result = []
        for i in range(n_sources):
            start = offsets_np[i]
            end = offsets_np[i + 1]
            neighbors = indices_np[start:end].tolist()
            result.append(neighbors)

        return result

    def to_padded(self, width: int | None = None, fill_value: int = -1) -> torch.Tensor:
        """Convert adjacency to a dense table, padding short rows.

        Rows of a ring adjacency keep their ring order; entries past a row's
        length are set to ``fill_value``. With icosphere rings and ``width=6``
        this gives one row per tile, with the sixth slot of each pentagon row
        holding ``fill_value``.

        Args:
            width: Number of columns. Defaults to the longest neighbor list.
            fill_value: Value written into unused slots.

        Returns:
            Tensor of shape (n_sources, width) with the dtype and device of indices.

        Raises:
            ValueError: If width is smaller than the longest neighbor list.

        Example:
            >>> adj = Adjacency(
            ...     offsets=torch.tensor([0, 3, 3, 5]),
            ...     indices=torch.tensor([1, 2, 0, 4, 3]),
            ... )
            >>> adj.to_padded().tolist()
            [[1, 2, 0], [-1, -1, -1], [4, 3, -1]]
        """
        counts = self.counts
        max_count = int(counts.max().item()) if self.n_sources > 0 else 0

        if width is None:
            width = max_count
        elif width < max_count:
            raise ValueError(
                f"`width` must be at least the longest neighbor list, but got "
                f"{width=} < {max_count=}."
            )

        padded = torch.full(
            (self.n_sources, width),
            fill_value,
            dtype=self.indices.dtype,
            device=self.indices.device,
        )
        if self.n_total_neighbors == 0:
            return padded

        ### Scatter each neighbor to (source, position within its list)
        source_ids = torch.repeat_interleave(
            torch.arange(self.n_sources, device=self.offsets.device), counts
        )
        positions = (
            torch.arange(self.n_total_neighbors, device=self.offsets.device)
            - self.offsets[:-1][source_ids]
        )
        padded[source_ids, positions] = self.indices

        return padded

    @property
    def n_sources(self) -> int:
        """Number of source elements (points or cells) in the adjacency."""
        return len(self.offsets) - 1

    @property
    def n_total_neighbors(self) -> int:
        """Total number of neighbor relationships across all sources."""
        return len(self.indices)

    @property
    def counts(self) -> torch.Tensor:
        """Number of neighbors of each source, shape (n_sources,)."""
        return self.offsets[1:] - self.offsets[:-1]


def build_adjacency_from_pairs(
    sources: torch.Tensor,  # shape: (n_pairs,)
    targets: torch.Tensor,  # shape: (n_pairs,)
    n_sources: int,
) -> Adjacency:
    """Group (source, target) pairs into an Adjacency.

    Pairs are ordered by source, then by target, so each neighbor list comes
    out sorted ascending. Duplicate pairs are kept; deduplicate beforehand if
    needed.

    Args:
        sources: Source index of each pair, values in [0, n_sources).
        targets: Target index of each pair.
        n_sources: Number of sources (length of the resulting adjacency).

    Returns:
        Adjacency with n_sources lists.
    """
    device = sources.device

    if len(sources) == 0:
        return Adjacency(
            offsets=torch.zeros(n_sources + 1, dtype=torch.int64, device=device),
            indices=torch.zeros(0, dtype=torch.int64, device=device),
        )

    ### Sort by source, breaking ties by target
    # Two stable passes avoid overflow in a combined sort key
    order = torch.argsort(targets, stable=True)
    order = order[torch.argsort(sources[order], stable=True)]

    ### Compute offsets from per-source counts
    offsets = torch.zeros(n_sources + 1, dtype=torch.int64, device=device)
    offsets[1:] = torch.cumsum(torch.bincount(sources, minlength=n_sources), dim=0)

    return Adjacency(
        offsets=offsets,
        indices=targets[order].to(torch.int64),
    )

"""Neighbor and adjacency computation for triangle meshes.

This module provides GPU-compatible functions for computing point-to-cells and
point-to-points adjacency. The point-to-points relation here is unordered;
torchhex.rings orders it into rings.

All adjacency relationships are returned as Adjacency tensorclass objects using
offset-indices encoding for efficient representation of ragged arrays.
"""

from torchhex.neighbors._adjacency import Adjacency, build_adjacency_from_pairs
from torchhex.neighbors._point_neighbors import (
    get_point_to_cells_adjacency,
    get_point_to_points_adjacency,
)

__all__ = [
    "Adjacency",
    "build_adjacency_from_pairs",
    "get_point_to_cells_adjacency",
    "get_point_to_points_adjacency",
]

"""Neighbor rings for hexagonal tiling of subdivided icosahedra.

Each vertex of a closed triangle mesh becomes the center of a tile whose
corners follow the ring of its neighbors.
"""

from torchhex.rings._rehex import rehex
from torchhex.rings._rotation import canonicalize_ring_rotation, ring_edges

__all__ = [
    "rehex",
    "canonicalize_ring_rotation",
    "ring_edges",
]

"""Input validation for triangle index buffers.

Provides:
1. Buffer normalization: flat index buffers to checked (n_cells, 3) connectivity
2. Manifold checks: closed, consistently wound surface detection
3. The error types raised by torchhex
"""

from torchhex.validation._errors import InvalidMeshError, NonManifoldMeshError
from torchhex.validation._indices import as_triangle_cells
from torchhex.validation._manifold import get_edge_face_counts, validate_closed_manifold

__all__ = [
    "InvalidMeshError",
    "NonManifoldMeshError",
    "as_triangle_cells",
    "get_edge_face_counts",
    "validate_closed_manifold",
]

class InvalidMeshError(ValueError):
    """Raised when a triangle index buffer is malformed.

    Covers buffers whose length is not a multiple of 3, indices that are
    negative or not smaller than the point count, and triangles that repeat a
    vertex.
    """


class NonManifoldMeshError(InvalidMeshError):
    """Raised when a mesh is not a closed, consistently wound 2-manifold.

    Covers edges not shared by exactly two triangles, edges traversed twice in
    the same direction, triangle fans that do not close into a single ring, and
    vertex degrees outside the accepted set.
    """

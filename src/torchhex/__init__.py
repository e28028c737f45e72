from torchhex.neighbors import Adjacency
from torchhex.rings import rehex, canonicalize_ring_rotation, ring_edges
from torchhex.validation import InvalidMeshError, NonManifoldMeshError

from torchhex.kernels.edge_extraction import extract_candidate_edges

__all__ = ["extract_candidate_edges"]

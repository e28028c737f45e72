"""Pytest configuration and shared fixtures for torchhex tests.

This module provides common test fixtures, mesh generators and assertion helpers
for testing ring construction across meshes and backends.

All fixtures defined here are automatically available to all test files
without explicit imports. Helper functions are imported explicitly with
``from conftest import ...``.
"""

import pytest
import torch


### Pytest Hooks ###


def pytest_collection_modifyitems(config, items):
    """Skip tests marked with 'cuda' if CUDA is not available.

    This hook runs during test collection phase and adds skip markers to CUDA tests
    when CUDA is unavailable.
    """
    if torch.cuda.is_available():
        return  # CUDA available, run all tests

    skip_cuda = pytest.mark.skip(reason="CUDA not available")
    for item in items:
        if "cuda" in item.keywords:
            item.add_marker(skip_cuda)


### Mesh Generators (Standalone Functions) ###


# Regular icosahedron, consistently wound (counter-clockwise seen from outside)
ICOSAHEDRON_FACES = [
    [0, 11, 5], [0, 5, 1], [0, 1, 7], [0, 7, 10], [0, 10, 11],
    [1, 5, 9], [5, 11, 4], [11, 10, 2], [10, 7, 6], [7, 1, 8],
    [3, 9, 4], [3, 4, 2], [3, 2, 6], [3, 6, 8], [3, 8, 9],
    [4, 9, 5], [2, 4, 11], [6, 2, 10], [8, 6, 7], [9, 8, 1],
]  # fmt: skip

# Local vertex indexing: [v0, v1, v2, e01, e12, e20]
# Corner children keep the parent's winding; the last child is the center
TRIANGLE_SUBDIVISION_PATTERN = [
    [0, 3, 5],  # Corner at v0: v0, e01, e20
    [1, 4, 3],  # Corner at v1: v1, e12, e01
    [2, 5, 4],  # Corner at v2: v2, e20, e12
    [3, 4, 5],  # Center: e01, e12, e20
]


def subdivide_cells(cells: torch.Tensor, n_points: int) -> tuple[torch.Tensor, int]:
    """Split every triangle into 4 at its edge midpoints (topology only).

    Each unique edge gets one new point index, n_points + edge_number, shared
    by the two triangles on either side.

    Returns:
        Tuple of (child_cells, new_n_points)
    """
    edge_to_idx: dict[tuple[int, int], int] = {}
    child_cells = []

    for a, b, c in cells.tolist():
        local_to_global = [a, b, c]
        for v0, v1 in ((a, b), (b, c), (c, a)):
            edge_tuple = (min(v0, v1), max(v0, v1))
            if edge_tuple not in edge_to_idx:
                edge_to_idx[edge_tuple] = n_points + len(edge_to_idx)
            local_to_global.append(edge_to_idx[edge_tuple])

        for pattern in TRIANGLE_SUBDIVISION_PATTERN:
            child_cells.append([local_to_global[i] for i in pattern])

    return (
        torch.tensor(child_cells, dtype=torch.int64, device=cells.device),
        n_points + len(edge_to_idx),
    )


def create_icosphere_cells(
    subdivisions: int = 0,
    device: str = "cpu",
) -> tuple[torch.Tensor, int]:
    """Create icosphere connectivity by repeated midpoint subdivision.

    Args:
        subdivisions: Number of subdivision levels (0 gives the icosahedron)
        device: Compute device ('cpu' or 'cuda')

    Returns:
        Tuple of (cells, n_points) with cells of shape (20 * 4**subdivisions, 3)
        and n_points == 10 * 4**subdivisions + 2.
    """
    cells = torch.tensor(ICOSAHEDRON_FACES, dtype=torch.int64, device=device)
    n_points = 12
    for _ in range(subdivisions):
        cells, n_points = subdivide_cells(cells, n_points)
    return cells, n_points


def create_tetrahedron_cells(device: str = "cpu") -> tuple[torch.Tensor, int]:
    """Regular tetrahedron surface: 4 points, every vertex of degree 3."""
    cells = torch.tensor(
        [[0, 1, 2], [0, 3, 1], [0, 2, 3], [1, 3, 2]],
        dtype=torch.int64,
        device=device,
    )
    return cells, 4


def create_octahedron_cells(device: str = "cpu") -> tuple[torch.Tensor, int]:
    """Octahedron surface: points +x, -x, +y, -y, +z, -z; every vertex of degree 4."""
    cells = torch.tensor(
        [
            [0, 2, 4], [2, 1, 4], [1, 3, 4], [3, 0, 4],
            [2, 0, 5], [1, 2, 5], [3, 1, 5], [0, 3, 5],
        ],
        dtype=torch.int64,
        device=device,
    )  # fmt: skip
    return cells, 6


def create_hexagon_fan_cells(device: str = "cpu") -> tuple[torch.Tensor, int]:
    """Open disk: center 0 surrounded by points 1..6 (the rim is a boundary)."""
    cells = torch.tensor(
        [[0, i, i % 6 + 1] for i in range(1, 7)],
        dtype=torch.int64,
        device=device,
    )
    return cells, 7


def create_pinched_tetrahedra_cells(device: str = "cpu") -> tuple[torch.Tensor, int]:
    """Two tetrahedron surfaces touching only at point 0.

    Every edge is shared by exactly two consistently wound triangles, but the
    triangles around point 0 form two separate fans.
    """
    cells, _ = create_tetrahedron_cells(device)
    second = cells.clone()
    second[second > 0] += 3
    return torch.cat([cells, second], dim=0), 7


### Assertion Helpers ###


def assert_on_device(tensor: torch.Tensor, expected_device: str) -> None:
    """Assert tensor is on expected device."""
    actual_device = tensor.device.type
    assert actual_device == expected_device, (
        f"Device mismatch: tensor is on {actual_device!r}, expected {expected_device!r}"
    )


def triangle_set(cells: torch.Tensor) -> set[tuple[int, int, int]]:
    """Triangles as a set, each rotated to start at its smallest corner.

    Rotation keeps winding, so (0, 1, 2) and (1, 2, 0) compare equal but
    (0, 2, 1) does not.
    """
    result = set()
    for tri in cells.tolist():
        shift = tri.index(min(tri))
        result.add(tuple(tri[shift:] + tri[:shift]))
    return result


### Pytest Fixtures ###


@pytest.fixture(
    params=[
        "cpu",
        pytest.param("cuda", marks=pytest.mark.cuda),
    ]
)
def device(request):
    """Parametrize tests over all available devices (CPU, CUDA).

    CUDA tests are automatically skipped if CUDA is not available via
    the pytest_collection_modifyitems hook.
    """
    return request.param


@pytest.fixture(params=[0, 1, 2, 3])
def subdivisions(request):
    """Parametrize over icosphere subdivision levels."""
    return request.param

import pytest

from dlx import build

# Knuth's example from "Dancing Links": the only exact cover is rows 0, 3, 4.
KNUTH_COLUMNS = ["A", "B", "C", "D", "E", "F", "G"]
KNUTH_ROWS = [
    [0, 0, 1, 0, 1, 1, 0],  # C E F
    [1, 0, 0, 1, 0, 0, 1],  # A D G
    [0, 1, 1, 0, 0, 1, 0],  # B C F
    [1, 0, 0, 1, 0, 0, 0],  # A D
    [0, 1, 0, 0, 0, 0, 1],  # B G
    [0, 0, 0, 1, 1, 0, 1],  # D E G
]

# Columns A, B: {A}, {B} and {A, B} give two covers.
TWO_COVER_ROWS = [
    [1, 0],
    [0, 1],
    [1, 1],
]


def sudoku_rows(n: int = 2):
    """Exact-cover rows for an empty (n*n)x(n*n) Sudoku, one per (r, c, digit)."""
    size = n * n
    rows = []
    for r in range(size):
        for c in range(size):
            for d in range(size):
                box = (r // n) * n + (c // n)
                rows.append([
                    r * size + c,
                    size * size + r * size + d,
                    2 * size * size + c * size + d,
                    3 * size * size + box * size + d,
                ])
    return 4 * size * size, rows


@pytest.fixture
def knuth():
    return build(KNUTH_ROWS, KNUTH_COLUMNS)


@pytest.fixture
def two_covers():
    return build(TWO_COVER_ROWS, ["A", "B"])

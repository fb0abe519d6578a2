# dlx.py
# Toroidal sparse matrix for Algorithm X (Dancing Links)

from __future__ import annotations

import logging
import numbers
from enum import Enum, auto
from typing import Hashable, Iterable, Iterator, Optional, Sequence

logger = logging.getLogger(__name__)

ROOT = 0


class NodeKind(Enum):
    ROOT = auto()
    HEADER = auto()
    CANDIDATE = auto()


class ConstructionError(ValueError):
    """The incidence matrix can't be turned into a Matrix."""


class Matrix:
    """
    Nodes live in an arena and refer to each other by index.

    Index 0 is the root, indices 1..n are the column headers (in column
    order) and everything after that is a candidate node. ``column[i]`` is
    the header a node belongs to (headers point at themselves, root at 0)
    and ``row[i]`` is the original row index of a candidate (-1 otherwise).

    Use build() or build_sparse() rather than calling this directly.
    """

    def __init__(self, num_columns: int, names: Sequence[Hashable]):
        self.names = list(names)
        self.kind: list[NodeKind] = [NodeKind.ROOT]
        self.column: list[int] = [ROOT]
        self.row: list[int] = [-1]
        self.left: list[int] = [ROOT]
        self.right: list[int] = [ROOT]
        self.up: list[int] = [ROOT]
        self.down: list[int] = [ROOT]
        # First node of each original row, None for rows without any 1s.
        self.row_heads: list[Optional[int]] = []

        # Column headers in a circular doubly-linked list.
        last = ROOT
        for _ in range(num_columns):
            col = self._new_node(NodeKind.HEADER, -1, -1)
            self.column[col] = col
            self.left[col] = last
            self.right[col] = ROOT
            self.right[last] = col
            self.left[ROOT] = col
            last = col

    def _new_node(self, kind: NodeKind, column: int, row: int) -> int:
        idx = len(self.kind)
        self.kind.append(kind)
        self.column.append(column)
        self.row.append(row)
        self.left.append(idx)
        self.right.append(idx)
        self.up.append(idx)
        self.down.append(idx)
        return idx

    def _append_row(self, column_indices: Iterable[int]) -> None:
        row_id = len(self.row_heads)
        first: Optional[int] = None
        prev: Optional[int] = None

        for c_idx in sorted(column_indices):
            col = self.header(c_idx)
            node = self._new_node(NodeKind.CANDIDATE, col, row_id)

            # Insert into column (at bottom)
            self.down[node] = col
            self.up[node] = self.up[col]
            self.down[self.up[col]] = node
            self.up[col] = node

            # Link horizontally within row
            if first is None:
                first = node
            if prev is not None:
                self.left[node] = prev
                self.right[node] = first
                self.right[prev] = node
                self.left[first] = node
            prev = node

        self.row_heads.append(first)

    # -- shape -------------------------------------------------------------

    @property
    def num_columns(self) -> int:
        return len(self.names)

    @property
    def num_rows(self) -> int:
        return len(self.row_heads)

    @property
    def num_nodes(self) -> int:
        return len(self.kind)

    def header(self, column_index: int) -> int:
        """Arena index of the header for a 0-based column index."""
        if not 0 <= column_index < self.num_columns:
            raise IndexError(f"column {column_index} out of range")
        return column_index + 1

    def column_index(self, node: int) -> int:
        """0-based column index of any header or candidate node."""
        return self.column[node] - 1

    def name(self, node: int) -> Hashable:
        return self.names[self.column_index(node)]

    # -- traversal ---------------------------------------------------------

    def columns(self) -> Iterator[int]:
        """Live column headers, left to right."""
        col = self.right[ROOT]
        while col != ROOT:
            yield col
            col = self.right[col]

    def column_nodes(self, header: int) -> Iterator[int]:
        node = self.down[header]
        while node != header:
            yield node
            node = self.down[node]

    def row_nodes(self, node: int) -> Iterator[int]:
        """The row containing ``node``, starting with ``node`` itself."""
        yield node
        other = self.right[node]
        while other != node:
            yield other
            other = self.right[other]

    def column_size(self, header: int) -> int:
        size = 0
        node = self.down[header]
        while node != header:
            size += 1
            node = self.down[node]
        return size

    def row_names(self, row_id: int) -> tuple[Hashable, ...]:
        """Column names of an original row, in column order."""
        head = self.row_heads[row_id]
        if head is None:
            return ()
        return tuple(self.name(node) for node in self.row_nodes(head))

    def is_solved(self) -> bool:
        return self.right[ROOT] == ROOT

    # -- dancing -----------------------------------------------------------

    def cover(self, column: int) -> None:
        self.right[self.left[column]] = self.right[column]
        self.left[self.right[column]] = self.left[column]
        row = self.down[column]
        while row != column:
            node = self.right[row]
            while node != row:
                self.up[self.down[node]] = self.up[node]
                self.down[self.up[node]] = self.down[node]
                node = self.right[node]
            row = self.down[row]

    def uncover(self, column: int) -> None:
        row = self.up[column]
        while row != column:
            node = self.left[row]
            while node != row:
                self.up[self.down[node]] = node
                self.down[self.up[node]] = node
                node = self.left[node]
            row = self.up[row]
        self.left[self.right[column]] = column
        self.right[self.left[column]] = column

    def select(self, min_size: bool = True) -> Optional[int]:
        """
        Pick the next column to branch on, or None once every column is covered.

        With ``min_size`` the live column with the fewest candidates wins and
        ties go to the leftmost one. Without it the leftmost column is used.
        """
        col = self.right[ROOT]
        if col == ROOT or not min_size:
            return None if col == ROOT else col

        best = col
        best_size = self.column_size(col)
        col = self.right[col]
        while col != ROOT and best_size > 0:
            size = self.column_size(col)
            if size < best_size:
                best, best_size = col, size
            col = self.right[col]
        return best

    # -- diagnostics -------------------------------------------------------

    def links(self) -> tuple[tuple[int, ...], ...]:
        """Snapshot of every node's four links (left, right, up, down)."""
        return (
            tuple(self.left),
            tuple(self.right),
            tuple(self.up),
            tuple(self.down),
        )

    def is_consistent(self) -> bool:
        """Check that every live ring is closed in both directions."""
        for node in range(self.num_nodes):
            if self.left[self.right[node]] != node or self.right[self.left[node]] != node:
                return False
            if self.kind[node] is NodeKind.ROOT:
                continue
            if self.up[self.down[node]] != node or self.down[self.up[node]] != node:
                return False
        return True


def _check_names(num_columns: int, column_names: Optional[Sequence[Hashable]]) -> list[Hashable]:
    if column_names is None:
        return list(range(num_columns))
    names = list(column_names)
    if len(names) != num_columns:
        raise ConstructionError(
            f"got {len(names)} column names for {num_columns} columns"
        )
    return names


def build_sparse(
    num_columns: int,
    rows: Iterable[Iterable[int]],
    column_names: Optional[Sequence[Hashable]] = None,
) -> Matrix:
    """Build a matrix from the column indices of the 1s in each row."""
    if num_columns < 1:
        raise ConstructionError("incidence matrix has no columns")
    names = _check_names(num_columns, column_names)

    checked: list[list[int]] = []
    for row_id, row in enumerate(rows):
        cols = list(row)
        for c_idx in cols:
            if not isinstance(c_idx, numbers.Integral) or not 0 <= c_idx < num_columns:
                raise ConstructionError(
                    f"row {row_id} names column {c_idx}, expected 0..{num_columns - 1}"
                )
        if len(set(cols)) != len(cols):
            raise ConstructionError(f"row {row_id} names a column more than once")
        checked.append(cols)
    if not checked:
        raise ConstructionError("incidence matrix has no rows")

    matrix = Matrix(num_columns, names)
    for cols in checked:
        matrix._append_row(cols)

    logger.debug(
        "Built matrix: %d rows, %d columns, %d nodes",
        matrix.num_rows,
        matrix.num_columns,
        matrix.num_nodes,
    )
    return matrix


def build(
    incidence: Iterable[Sequence[int]],
    column_names: Optional[Sequence[Hashable]] = None,
) -> Matrix:
    """Build a matrix from a rectangular 0/1 incidence matrix."""
    grid = [list(row) for row in incidence]
    if not grid:
        raise ConstructionError("incidence matrix has no rows")
    width = len(grid[0])
    if width == 0:
        raise ConstructionError("incidence matrix has no columns")

    rows: list[list[int]] = []
    for row_id, row in enumerate(grid):
        if len(row) != width:
            raise ConstructionError(
                f"row {row_id} has {len(row)} entries, expected {width}"
            )
        cols: list[int] = []
        for c_idx, value in enumerate(row):
            if value == 1:
                cols.append(c_idx)
            elif value != 0:
                raise ConstructionError(
                    f"entry ({row_id}, {c_idx}) is {value!r}, expected 0 or 1"
                )
        rows.append(cols)

    return build_sparse(width, rows, column_names)

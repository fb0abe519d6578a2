# solver.py
# Algorithm X search over a dlx.Matrix

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Iterator, List, Optional

from dlx import Matrix

logger = logging.getLogger(__name__)


class SearchControl(Enum):
    CONTINUE = auto()
    STOP = auto()


OnSolution = Callable[[List[int]], Optional[SearchControl]]


@dataclass
class SearchStats:
    solutions: int = 0
    nodes: int = 0  # rows tried
    dead_ends: int = 0  # columns reached with no candidates left
    max_depth: int = 0


class DLXSolver:
    def __init__(self, matrix: Matrix, min_size: bool = True):
        self.matrix = matrix
        self.min_size = min_size
        self.stats = SearchStats()

    def solve(self) -> Iterator[List[int]]:
        """
        Yield every exact cover as a list of original row indices, in the
        order the rows were chosen.

        The matrix is restored when the generator finishes, and also when it
        is closed early or garbage collected mid-search.
        """
        m = self.matrix
        solution: list[int] = []
        self.stats = SearchStats()

        def search(depth: int):
            if depth > self.stats.max_depth:
                self.stats.max_depth = depth

            column = m.select(self.min_size)
            if column is None:
                self.stats.solutions += 1
                yield [m.row[node] for node in solution]
                return

            if m.down[column] == column:
                self.stats.dead_ends += 1
                return

            m.cover(column)
            try:
                row = m.down[column]
                while row != column:
                    solution.append(row)
                    self.stats.nodes += 1

                    node = m.right[row]
                    while node != row:
                        m.cover(m.column[node])
                        node = m.right[node]

                    try:
                        yield from search(depth + 1)
                    finally:
                        row = solution.pop()
                        node = m.left[row]
                        while node != row:
                            m.uncover(m.column[node])
                            node = m.left[node]

                    row = m.down[row]
            finally:
                m.uncover(column)

        logger.debug(
            "Searching %d rows x %d columns (min_size=%s)",
            m.num_rows,
            m.num_columns,
            self.min_size,
        )
        yield from search(0)
        logger.debug("Search exhausted: %s", self.stats)

    def solve_one(self) -> Optional[List[int]]:
        solutions = self.solve()
        try:
            for sol in solutions:
                return sol
            return None
        finally:
            solutions.close()

    def count(self, limit: Optional[int] = None) -> int:
        return self.search(lambda _: SearchControl.CONTINUE, max_solutions=limit)

    def search(self, on_solution: OnSolution, max_solutions: Optional[int] = None) -> int:
        """
        Hand each solution to ``on_solution`` and return how many were emitted.

        The callback returns SearchControl.STOP to end the search early;
        anything else (including None) keeps it going.
        """
        if max_solutions is not None and max_solutions <= 0:
            return 0

        emitted = 0
        solutions = self.solve()
        try:
            for sol in solutions:
                emitted += 1
                if on_solution(sol) is SearchControl.STOP:
                    logger.debug("Stop requested after %d solution(s)", emitted)
                    break
                if max_solutions is not None and emitted >= max_solutions:
                    logger.debug("Solution cap of %d reached", max_solutions)
                    break
        finally:
            solutions.close()
        return emitted


def search(
    matrix: Matrix,
    on_solution: OnSolution,
    *,
    min_size: bool = True,
    max_solutions: Optional[int] = None,
) -> int:
    return DLXSolver(matrix, min_size=min_size).search(on_solution, max_solutions)

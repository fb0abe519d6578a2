# steps.py
# Step-by-step trace of the Algorithm X search, for visualisation

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from dlx import Matrix

logger = logging.getLogger(__name__)


class StepKind(Enum):
    INIT = "INIT"
    CHOOSE_COL = "CHOOSE_COL"
    COVER_COL = "COVER_COL"
    SELECT_ROW = "SELECT_ROW"
    UNSELECT_ROW = "UNSELECT_ROW"
    UNCOVER_COL = "UNCOVER_COL"
    BACKTRACK = "BACKTRACK"
    SOLUTION = "SOLUTION"


@dataclass(frozen=True)
class Step:
    kind: StepKind
    data: Dict[str, Any] = field(default_factory=dict)
    state: List[int] = field(default_factory=list)  # selected rows so far


def solve_steps(matrix: Matrix, min_size: bool = True) -> Iterator[Step]:
    """
    Generator that yields a Step for every decision the search makes.

    Columns are reported by 0-based column index and rows by their index in
    the original incidence matrix. Closing the generator early still uncovers
    everything, so the matrix can be searched again afterwards.
    """
    m = matrix
    solution: list[int] = []

    # Helper to capture current state (list of row ids)
    def get_state() -> List[int]:
        return [m.row[node] for node in solution]

    def search(depth: int = 0) -> Iterator[Step]:
        # 1. Check if solved
        if m.is_solved():
            yield Step(StepKind.SOLUTION, {"solution": get_state()}, get_state())
            return

        # 2. Choose column, reporting every live column that was considered
        column = m.select(min_size)
        candidates = [
            {"column": m.column_index(col), "size": m.column_size(col)}
            for col in m.columns()
        ]
        size = m.column_size(column)
        yield Step(
            StepKind.CHOOSE_COL,
            {"column": m.column_index(column), "size": size, "candidates": candidates},
            get_state(),
        )

        if size == 0:
            yield Step(StepKind.BACKTRACK, {"column": m.column_index(column)}, get_state())
            return

        m.cover(column)
        try:
            yield Step(StepKind.COVER_COL, {"column": m.column_index(column)}, get_state())

            row = m.down[column]
            option = 0
            while row != column:
                option += 1
                solution.append(row)

                node = m.right[row]
                while node != row:
                    m.cover(m.column[node])
                    node = m.right[node]

                try:
                    yield Step(
                        StepKind.SELECT_ROW,
                        {
                            "row": m.row[row],
                            "column": m.column_index(column),
                            "option": option,
                            "options": size,
                        },
                        get_state(),
                    )
                    yield from search(depth + 1)
                finally:
                    solution.pop()
                    node = m.left[row]
                    while node != row:
                        m.uncover(m.column[node])
                        node = m.left[node]

                yield Step(StepKind.UNSELECT_ROW, {"row": m.row[row]}, get_state())
                row = m.down[row]
        finally:
            m.uncover(column)

        yield Step(StepKind.UNCOVER_COL, {"column": m.column_index(column)}, get_state())

        if depth > 0:
            yield Step(StepKind.BACKTRACK, {"column": m.column_index(column)}, get_state())

    yield Step(StepKind.INIT)
    yield from search()


def record_steps(
    matrix: Matrix,
    stop_at_solution: bool = True,
    limit: Optional[int] = None,
    min_size: bool = True,
) -> List[Step]:
    """Collect the trace into a list, optionally stopping early."""
    history: List[Step] = []
    steps = solve_steps(matrix, min_size=min_size)
    try:
        for step in steps:
            history.append(step)
            if stop_at_solution and step.kind is StepKind.SOLUTION:
                break
            if limit is not None and len(history) >= limit:
                break
    finally:
        steps.close()
    logger.debug("Recorded %d steps", len(history))
    return history

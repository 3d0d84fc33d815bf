# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Sudoku Generator

1. Fill a blank 9x9 board with randomized backtracking
2. Clear shuffled cells one at a time, keeping a clear only while the
   puzzle still has exactly one solution

Both the filler and the solution counter walk the empty cells in row-major
order with an explicit stack instead of recursion. Internally empty cells
are 0; exported puzzles use None.
"""

import logging
import random
import time
from typing import List, Optional, Sequence, Tuple

from config import SudokuSettings, get_grid_config
from models import Difficulty, SudokuCell, SudokuPuzzle


logger = logging.getLogger(__name__)

SIZE = 9
BOX = 3
DIGITS = tuple(range(1, SIZE + 1))

Board = List[List[int]]


def empty_board() -> Board:
    return [[0] * SIZE for _ in range(SIZE)]


def is_valid_placement(board: Board, row: int, col: int, digit: int) -> bool:
    """True if ``digit`` is not already in the row, column or 3x3 box."""
    if digit in board[row]:
        return False
    for r in range(SIZE):
        if board[r][col] == digit:
            return False
    box_row = (row // BOX) * BOX
    box_col = (col // BOX) * BOX
    for r in range(box_row, box_row + BOX):
        for c in range(box_col, box_col + BOX):
            if board[r][c] == digit:
                return False
    return True


def find_empty(board: Board) -> Optional[Tuple[int, int]]:
    """First empty cell in row-major order."""
    for r in range(SIZE):
        for c in range(SIZE):
            if board[r][c] == 0:
                return r, c
    return None


def _empty_cells(board: Board) -> List[Tuple[int, int]]:
    return [(r, c) for r in range(SIZE) for c in range(SIZE) if board[r][c] == 0]


def fill_grid(board: Board, rng: random.Random) -> bool:
    """
    Complete ``board`` in place with randomized backtracking.

    Each empty cell keeps a stack frame holding the digits still to try,
    shuffled once when the cell is first reached.

    Returns:
        True if the board was completed, False if no completion exists
    """
    empties = _empty_cells(board)
    remaining: List[List[int]] = []
    index = 0

    while 0 <= index < len(empties):
        row, col = empties[index]
        if len(remaining) == index:
            digits = list(DIGITS)
            rng.shuffle(digits)
            remaining.append(digits)

        board[row][col] = 0
        candidates = remaining[index]
        placed = False
        while candidates:
            digit = candidates.pop()
            if is_valid_placement(board, row, col, digit):
                board[row][col] = digit
                placed = True
                break

        if placed:
            index += 1
        else:
            remaining.pop()
            index -= 1

    return index == len(empties)


def count_solutions(board: Board, limit: int = 2) -> int:
    """
    Count completions of ``board``, stopping once ``limit`` are found.

    The board is not modified.
    """
    work = [row[:] for row in board]
    empties = _empty_cells(work)
    if not empties:
        return 1 if is_valid_solution(work) else 0

    count = 0
    remaining: List[List[int]] = []
    index = 0

    while index >= 0:
        if index == len(empties):
            count += 1
            if count >= limit:
                break
            index -= 1
            continue

        row, col = empties[index]
        if len(remaining) == index:
            # Reversed so pop() tries 1 first
            remaining.append(list(reversed(DIGITS)))

        work[row][col] = 0
        candidates = remaining[index]
        placed = False
        while candidates:
            digit = candidates.pop()
            if is_valid_placement(work, row, col, digit):
                work[row][col] = digit
                placed = True
                break

        if placed:
            index += 1
        else:
            remaining.pop()
            index -= 1

    return count


def remove_numbers(
    board: Board,
    target_clues: int,
    rng: random.Random,
    max_failed: int = 100,
    solution_limit: int = 2,
) -> int:
    """
    Clear cells of a solved ``board`` in place while the solution stays unique.

    Returns:
        Number of clues left on the board
    """
    positions = [(r, c) for r in range(SIZE) for c in range(SIZE)]
    rng.shuffle(positions)

    clues = sum(1 for row in board for cell in row if cell)
    failed = 0

    for row, col in positions:
        if clues <= target_clues or failed >= max_failed:
            break
        if board[row][col] == 0:
            continue

        backup = board[row][col]
        board[row][col] = 0

        if count_solutions(board, solution_limit) == 1:
            clues -= 1
        else:
            board[row][col] = backup
            failed += 1

    logger.debug(f"Cell removal: {clues} clues left, {failed} failed removals")
    return clues


def is_valid_solution(grid: Sequence[Sequence[SudokuCell]]) -> bool:
    """True if every row, column and box is a permutation of 1-9."""
    expected = set(DIGITS)
    if len(grid) != SIZE or any(len(row) != SIZE for row in grid):
        return False

    for row in grid:
        if set(row) != expected:
            return False
    for c in range(SIZE):
        if {grid[r][c] for r in range(SIZE)} != expected:
            return False
    for box_row in range(0, SIZE, BOX):
        for box_col in range(0, SIZE, BOX):
            box = {
                grid[r][c]
                for r in range(box_row, box_row + BOX)
                for c in range(box_col, box_col + BOX)
            }
            if box != expected:
                return False
    return True


def check_solution(
    puzzle: SudokuPuzzle,
    user_grid: Sequence[Sequence[SudokuCell]],
) -> Tuple[bool, List[Tuple[int, int]]]:
    """
    Compare a player's grid against the solution.

    Returns:
        (correct, incorrect_cells) where incorrect cells are (row, col)
        pairs that are filled with a wrong digit
    """
    incorrect = []
    complete = True
    for r in range(SIZE):
        for c in range(SIZE):
            value = user_grid[r][c]
            if value is None or value == 0:
                complete = False
            elif value != puzzle.solution[r][c]:
                incorrect.append((r, c))
    return complete and not incorrect, incorrect


class SudokuGenerator:
    """
    Generates unique-solution Sudoku puzzles for a difficulty.

    Usage:
        generator = SudokuGenerator(rng=random.Random(1))
        puzzle = generator.generate("easy")
    """

    def __init__(
        self,
        settings: Optional[SudokuSettings] = None,
        rng: Optional[random.Random] = None,
    ):
        self.settings = settings or SudokuSettings()
        self.rng = rng or random.Random()

    def generate(self, difficulty, title: str = "Sudoku") -> SudokuPuzzle:
        """
        Build a puzzle whose clue count aims at the middle of the
        difficulty's configured range.
        """
        difficulty = Difficulty.parse(difficulty)
        grid_config = get_grid_config("sudoku", difficulty.value)
        target_clues = (grid_config.min_words + grid_config.max_words) // 2

        start_time = time.time()
        board = empty_board()
        if not fill_grid(board, self.rng):
            # An empty board always has a completion
            raise RuntimeError("Sudoku filler failed on an empty board")
        solution = [row[:] for row in board]

        clues = remove_numbers(
            board,
            target_clues,
            self.rng,
            max_failed=self.settings.max_failed_removals,
            solution_limit=self.settings.solution_limit,
        )
        elapsed = time.time() - start_time

        if clues > target_clues:
            logger.warning(
                f"Sudoku stopped at {clues} clues (target {target_clues}) "
                f"after {self.settings.max_failed_removals} failed removals"
            )
        logger.info(
            f"Sudoku {difficulty.value}: {clues} clues "
            f"(target {target_clues}) in {elapsed:.2f}s"
        )

        grid: List[List[SudokuCell]] = [
            [cell if cell else None for cell in row] for row in board
        ]
        return SudokuPuzzle(
            title=title,
            difficulty=difficulty,
            grid=grid,
            solution=solution,
            clue_count=clues,
        )


def generate(
    difficulty,
    title: str = "Sudoku",
    settings: Optional[SudokuSettings] = None,
    rng: Optional[random.Random] = None,
) -> SudokuPuzzle:
    """Convenience wrapper around SudokuGenerator."""
    return SudokuGenerator(settings=settings, rng=rng).generate(difficulty, title=title)

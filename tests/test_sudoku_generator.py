# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""Unit tests for sudoku_generator module."""

import os
import random
import sys
import unittest

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from config import SudokuSettings, get_grid_config
from models import Difficulty, PuzzleInputError
from sudoku_generator import (
    SudokuGenerator, check_solution, count_solutions, empty_board, fill_grid,
    find_empty, generate, is_valid_placement, is_valid_solution, remove_numbers,
)
from validator import validate_sudoku


# A known valid solution (shifted-row pattern)
SOLVED = [[(r * 3 + r // 3 + c) % 9 + 1 for c in range(9)] for r in range(9)]


class TestBoardHelpers(unittest.TestCase):
    """Tests for the placement and search helpers."""

    def test_known_solution_is_valid(self):
        """Test the fixture grid is a valid Sudoku."""
        self.assertTrue(is_valid_solution(SOLVED))

    def test_invalid_solutions(self):
        """Test broken grids are rejected."""
        swapped = [row[:] for row in SOLVED]
        swapped[0][0], swapped[0][1] = swapped[0][1], swapped[0][0]
        self.assertFalse(is_valid_solution(swapped))

        with_hole = [row[:] for row in SOLVED]
        with_hole[4][4] = None
        self.assertFalse(is_valid_solution(with_hole))

        self.assertFalse(is_valid_solution(SOLVED[:8]))

    def test_is_valid_placement(self):
        """Test row, column and box constraints."""
        board = empty_board()
        board[0][0] = 5

        self.assertFalse(is_valid_placement(board, 0, 8, 5))  # row
        self.assertFalse(is_valid_placement(board, 8, 0, 5))  # column
        self.assertFalse(is_valid_placement(board, 2, 2, 5))  # box
        self.assertTrue(is_valid_placement(board, 4, 4, 5))

    def test_find_empty_row_major(self):
        """Test the first empty cell is found in reading order."""
        board = [row[:] for row in SOLVED]
        board[3][7] = 0
        board[5][1] = 0

        self.assertEqual(find_empty(board), (3, 7))
        self.assertIsNone(find_empty(SOLVED))

    def test_fill_grid(self):
        """Test randomized fill produces a valid solution."""
        board = empty_board()

        self.assertTrue(fill_grid(board, random.Random(1)))
        self.assertTrue(is_valid_solution(board))

    def test_fill_grid_keeps_givens(self):
        """Test filling a partial board keeps the existing digits."""
        board = [row[:] for row in SOLVED]
        for r in range(9):
            board[r][r] = 0

        self.assertTrue(fill_grid(board, random.Random(2)))
        self.assertEqual(board, SOLVED)

    def test_fill_grid_impossible(self):
        """Test an unsolvable board is reported."""
        board = empty_board()
        board[0] = [1, 2, 3, 4, 5, 6, 7, 8, 0]
        board[1][8] = 9  # nothing fits at [0,8]

        self.assertFalse(fill_grid(board, random.Random(3)))


class TestCountSolutions(unittest.TestCase):
    """Tests for the capped solution counter."""

    def test_full_grid_has_one_solution(self):
        """Test a complete valid grid counts as one solution."""
        self.assertEqual(count_solutions(SOLVED), 1)

    def test_single_hole(self):
        """Test a single removed cell still has one solution."""
        board = [row[:] for row in SOLVED]
        board[0][0] = 0

        self.assertEqual(count_solutions(board), 1)
        self.assertEqual(board[0][0], 0)

    def test_empty_board_capped(self):
        """Test the counter stops at the limit."""
        self.assertEqual(count_solutions(empty_board(), limit=2), 2)


class TestRemoveNumbers(unittest.TestCase):
    """Tests for remove_numbers."""

    def test_stops_at_target(self):
        """Test removal stops at the target clue count."""
        board = [row[:] for row in SOLVED]

        clues = remove_numbers(board, 60, random.Random(4))

        self.assertEqual(clues, 60)
        self.assertEqual(sum(1 for row in board for cell in row if cell), 60)
        self.assertEqual(count_solutions(board), 1)

    def test_no_failed_removals_allowed(self):
        """Test a zero failure budget removes nothing."""
        board = [row[:] for row in SOLVED]

        clues = remove_numbers(board, 0, random.Random(5), max_failed=0)

        self.assertEqual(clues, 81)


class TestGenerate(unittest.TestCase):
    """Tests for full puzzle generation."""

    def test_easy_five_runs(self):
        """Test five easy puzzles are valid with clue counts in range."""
        config = get_grid_config("sudoku", "easy")
        rng = random.Random(2024)

        for _ in range(5):
            puzzle = generate("easy", rng=rng)

            self.assertTrue(is_valid_solution(puzzle.solution))
            self.assertGreaterEqual(puzzle.clue_count, config.min_words)
            self.assertLessEqual(puzzle.clue_count, config.max_words)
            for r in range(9):
                for c in range(9):
                    if puzzle.grid[r][c] is not None:
                        self.assertEqual(puzzle.grid[r][c], puzzle.solution[r][c])

    def test_unique_solution(self):
        """Test the generated clues determine the solution."""
        puzzle = SudokuGenerator(rng=random.Random(6)).generate(Difficulty.MEDIUM)

        board = [[cell or 0 for cell in row] for row in puzzle.grid]
        self.assertEqual(count_solutions(board), 1)
        self.assertTrue(fill_grid(board, random.Random(0)))
        self.assertEqual(board, puzzle.solution)

    def test_validator_accepts_generated(self):
        """Test the structural validator accepts a generated puzzle."""
        puzzle = generate("medium", title="Sudoku Médio", rng=random.Random(7))

        result = validate_sudoku(puzzle)
        self.assertTrue(result.valid, str(result))
        self.assertEqual(result.stats["clues"], puzzle.clue_count)

    def test_failure_budget_limits_removal(self):
        """Test the failure cap is honoured."""
        puzzle = generate(
            "hard", rng=random.Random(8),
            settings=SudokuSettings(max_failed_removals=0),
        )

        self.assertGreaterEqual(puzzle.clue_count, 24)
        self.assertTrue(is_valid_solution(puzzle.solution))

    def test_unknown_difficulty(self):
        """Test bad difficulties are rejected."""
        with self.assertRaises(PuzzleInputError):
            generate("extreme")

    def test_export_shape(self):
        """Test the exported dict uses None for empty cells."""
        puzzle = generate("easy", title="Sudoku", rng=random.Random(9))

        data = puzzle.to_dict()
        self.assertEqual(data['gameType'], "sudoku")
        self.assertEqual(data['difficulty'], "easy")
        self.assertEqual(data['clueCount'], puzzle.clue_count)
        self.assertEqual(sum(cell is None for row in data['grid'] for cell in row),
                         81 - puzzle.clue_count)


class TestCheckSolution(unittest.TestCase):
    """Tests for check_solution."""

    def setUp(self):
        self.puzzle = generate("easy", rng=random.Random(10))

    def test_correct(self):
        """Test the solution itself is correct."""
        correct, wrong = check_solution(self.puzzle, self.puzzle.solution)

        self.assertTrue(correct)
        self.assertEqual(wrong, [])

    def test_wrong_cell(self):
        """Test wrong digits are reported."""
        attempt = [row[:] for row in self.puzzle.solution]
        attempt[2][3] = attempt[2][3] % 9 + 1

        correct, wrong = check_solution(self.puzzle, attempt)

        self.assertFalse(correct)
        self.assertEqual(wrong, [(2, 3)])

    def test_incomplete(self):
        """Test an unfinished grid is not correct but has no wrong cells."""
        correct, wrong = check_solution(self.puzzle, self.puzzle.grid)

        self.assertFalse(correct)
        self.assertEqual(wrong, [])


if __name__ == '__main__':
    unittest.main()

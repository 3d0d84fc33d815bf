# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Puzzle Validator

Checks that a generated puzzle is structurally sound:
1. Crossword letters agree with every placed word and blocks hold nothing
2. Word-search words can be traced in the grid and the answer matches it
3. Sudoku solutions are complete and the clues lead to exactly one of them
4. Soletra words obey the letter, center and pangram rules

Errors mean the generator has a bug. Under-delivery (fewer words than
asked for) is reported as a warning.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set, Tuple

from models import (
    Axis, CrosswordPuzzle, InvariantViolation, Puzzle, SearchDirection, SoletraPuzzle,
    SudokuPuzzle, WordSearchPuzzle,
)
from soletra import word_score
from sudoku_generator import count_solutions, is_valid_solution
from word_selector import is_pangram


MIN_CROSSWORD_WORDS = 3
MIN_SOLETRA_WORDS = 10
MIN_SOLETRA_WORD_LENGTH = 4


@dataclass
class ValidationResult:
    """Result of puzzle validation."""
    valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    stats: Dict = field(default_factory=dict)

    def error(self, message: str):
        self.errors.append(message)
        self.valid = False

    def __str__(self):
        status = "✅ VALID" if self.valid else "❌ INVALID"
        lines = [f"Structure: {status}"]

        if self.errors:
            lines.append("\nErrors:")
            for e in self.errors:
                lines.append(f"  ❌ {e}")

        if self.warnings:
            lines.append("\nWarnings:")
            for w in self.warnings:
                lines.append(f"  ⚠️ {w}")

        if self.stats:
            lines.append("\nStats:")
            for k, v in self.stats.items():
                lines.append(f"  {k}: {v}")

        return "\n".join(lines)


def _check_metadata(result: ValidationResult, title: str, description: Optional[str] = None):
    if not title:
        result.error("Title is required")
    if description is not None and not description:
        result.warnings.append("Description is empty")


def validate_crossword(puzzle: CrosswordPuzzle) -> ValidationResult:
    """Structural checks for a crossword."""
    result = ValidationResult()
    _check_metadata(result, puzzle.title, puzzle.description)

    width, height = puzzle.width, puzzle.height
    if len(puzzle.cells) != width * height:
        result.error(f"Expected {width * height} cells, found {len(puzzle.cells)}")
        return result

    for index, cell in enumerate(puzzle.cells):
        x, y = index % width, index // width
        if cell.x != str(x + 1) or cell.y != str(y + 1):
            result.error(f"Cell {index} has coordinates ({cell.x}, {cell.y})")
        if cell.is_block and cell.solution is not None:
            result.error(f"Block at ({x + 1}, {y + 1}) has a solution letter")
        if not cell.is_block and (not cell.solution or len(cell.solution) != 1):
            result.error(f"Cell ({x + 1}, {y + 1}) has no single-letter solution")

    covered: Dict[Tuple[int, int], int] = {}
    for placed in puzzle.placed_words:
        for i, (x, y) in enumerate(placed.cells()):
            if not (0 <= x < width and 0 <= y < height):
                result.error(f"'{placed.word}' runs outside the grid")
                break
            cell = puzzle.cell_at(x, y)
            if cell.is_block or cell.solution != placed.word[i]:
                result.error(
                    f"'{placed.word}' does not match the grid at ({x + 1}, {y + 1})"
                )
                break
            covered[(x, y)] = covered.get((x, y), 0) + 1

    if puzzle.placed_words:
        for index, cell in enumerate(puzzle.cells):
            position = (index % width, index // width)
            if not cell.is_block and position not in covered:
                result.error(
                    f"Letter at ({position[0] + 1}, {position[1] + 1}) belongs to no word"
                )

        isolated = [
            p.word for p in puzzle.placed_words
            if all(covered.get(c, 0) < 2 for c in p.cells())
        ]
        if len(puzzle.placed_words) > 1 and isolated:
            result.error(f"Words without any intersection: {isolated}")

    word_ids = {w.id for w in puzzle.words}
    total_clues = 0
    for group in puzzle.clue_groups:
        for clue in group.clues:
            total_clues += 1
            if clue.word not in word_ids:
                result.error(f"Clue references unknown word id {clue.word}")
    if total_clues != len(puzzle.words):
        result.error(f"{len(puzzle.words)} words but {total_clues} clues")

    if total_clues < MIN_CROSSWORD_WORDS:
        result.warnings.append(f"Only {total_clues} words (at least {MIN_CROSSWORD_WORDS} expected)")

    filled = sum(1 for c in puzzle.cells if not c.is_block)
    horizontal = sum(1 for p in puzzle.placed_words if p.axis is Axis.HORIZONTAL)
    result.stats["size"] = f"{width}x{height}"
    result.stats["words"] = len(puzzle.words)
    result.stats["horizontal"] = horizontal
    result.stats["vertical"] = len(puzzle.placed_words) - horizontal
    result.stats["density"] = f"{filled / (width * height):.0%}" if width * height else "0%"
    return result


def trace_word(grid: Sequence[Sequence[str]], word: str) -> Optional[List[Tuple[int, int]]]:
    """Cells spelling ``word`` along any of the four search directions."""
    height = len(grid)
    width = len(grid[0]) if height else 0
    for row in range(height):
        for col in range(width):
            if grid[row][col] != word[0]:
                continue
            for direction in SearchDirection:
                cells = []
                for i, letter in enumerate(word):
                    r = row + i * direction.dy
                    c = col + i * direction.dx
                    if not (0 <= r < height and 0 <= c < width) or grid[r][c] != letter:
                        break
                    cells.append((r, c))
                else:
                    return cells
    return None


def validate_wordsearch(puzzle: WordSearchPuzzle, filler: str = "-") -> ValidationResult:
    """Grid shape, answer consistency and word traceability for a word search."""
    result = ValidationResult()
    _check_metadata(result, puzzle.title, puzzle.description)

    content = puzzle.content_grid()
    answer = puzzle.answer_grid()

    if not content:
        result.error("Grid cannot be empty")
        return result
    if len(content) != len(answer):
        result.error("Content and answer have different row counts")
        return result

    width = len(content[0])
    for r, (content_row, answer_row) in enumerate(zip(content, answer)):
        if len(content_row) != width or len(answer_row) != width:
            result.error(f"Row {r + 1} has the wrong number of cells")
            continue
        for c, (letter, shown) in enumerate(zip(content_row, answer_row)):
            if len(letter) != 1 or not ('A' <= letter <= 'Z'):
                result.error(f"Cell ({r + 1}, {c + 1}) is not an uppercase letter: {letter!r}")
            if shown != filler and shown != letter:
                result.error(f"Answer differs from content at ({r + 1}, {c + 1})")
    if not result.valid:
        return result

    word_cells: Set[Tuple[int, int]] = set()
    if puzzle.placements:
        for placement in puzzle.placements:
            cells = placement.cells()
            if any(content[r][c] != letter for (r, c), letter in zip(cells, placement.word)):
                result.error(f"'{placement.word}' is not at its recorded position")
            word_cells.update(cells)
    for word in puzzle.placed_words:
        if trace_word(content, word) is None:
            result.error(f"'{word}' cannot be traced in the grid")

    if puzzle.placements:
        for r, answer_row in enumerate(answer):
            for c, shown in enumerate(answer_row):
                if ((r, c) in word_cells) != (shown != filler):
                    result.error(f"Answer cell ({r + 1}, {c + 1}) disagrees with placed words")

    if not puzzle.placed_words:
        result.warnings.append("No words were placed")
    if puzzle.dropped_words:
        result.warnings.append(f"Dropped words: {', '.join(puzzle.dropped_words)}")

    result.stats["size"] = f"{width}x{len(content)}"
    result.stats["words"] = len(puzzle.placed_words)
    result.stats["dropped"] = puzzle.dropped_count
    return result


def validate_sudoku(puzzle: SudokuPuzzle, check_unique: bool = True) -> ValidationResult:
    """Solution validity, clue consistency and (optionally) uniqueness."""
    result = ValidationResult()
    _check_metadata(result, puzzle.title)

    if len(puzzle.grid) != 9 or any(len(row) != 9 for row in puzzle.grid):
        result.error("Grid must be 9x9")
    if len(puzzle.solution) != 9 or any(len(row) != 9 for row in puzzle.solution):
        result.error("Solution must be 9x9")
    if not result.valid:
        return result

    if not is_valid_solution(puzzle.solution):
        result.error("Solution is not a valid Sudoku")

    clues = 0
    for r in range(9):
        for c in range(9):
            value = puzzle.grid[r][c]
            if value is None:
                continue
            clues += 1
            if value != puzzle.solution[r][c]:
                result.error(f"Clue does not match the solution at [{r},{c}]")
    if clues != puzzle.clue_count:
        result.error(f"clue_count is {puzzle.clue_count} but the grid has {clues} clues")

    if check_unique and result.valid:
        board = [[cell or 0 for cell in row] for row in puzzle.grid]
        if count_solutions(board, 2) != 1:
            result.error("Puzzle does not have a unique solution")

    result.stats["clues"] = clues
    return result


def validate_soletra(puzzle: SoletraPuzzle) -> ValidationResult:
    """Letter, center, pangram and score rules for a Soletra puzzle."""
    result = ValidationResult()
    _check_metadata(result, puzzle.title)

    letters = set(puzzle.letters)
    if len(puzzle.letters) != 7 or len(letters) != 7:
        result.error("Must have exactly 7 distinct letters")
    if not puzzle.center_letter:
        result.error("Center letter is required")
    elif puzzle.center_letter not in letters:
        result.error("Center letter must be one of the 7 letters")

    for word in puzzle.valid_words:
        if len(word) < MIN_SOLETRA_WORD_LENGTH:
            result.error(f"'{word}' is shorter than {MIN_SOLETRA_WORD_LENGTH} letters")
        if puzzle.center_letter not in word:
            result.error(f"'{word}' does not contain the center letter '{puzzle.center_letter}'")
        unavailable = [ch for ch in word if ch not in letters]
        if unavailable:
            result.error(f"'{word}' uses unavailable letter '{unavailable[0]}'")

    valid_words = set(puzzle.valid_words)
    for pangram in puzzle.pangrams:
        if not is_pangram(pangram, puzzle.letters):
            result.error(f"'{pangram}' is not a valid pangram")
        if pangram not in valid_words:
            result.error(f"Pangram '{pangram}' is missing from the word list")

    expected = sum(word_score(w, puzzle.letters) for w in puzzle.valid_words)
    if puzzle.valid_words and puzzle.max_score <= 0:
        result.error("Maximum score must be greater than zero")
    elif puzzle.max_score != expected:
        result.error(f"max_score is {puzzle.max_score}, expected {expected}")

    if not puzzle.valid_words:
        result.warnings.append("No valid words")
    elif len(puzzle.valid_words) < MIN_SOLETRA_WORDS:
        result.warnings.append(
            f"Only {len(puzzle.valid_words)} words - at least {MIN_SOLETRA_WORDS} recommended"
        )

    result.stats["words"] = len(puzzle.valid_words)
    result.stats["pangrams"] = len(puzzle.pangrams)
    result.stats["max_score"] = puzzle.max_score
    return result


def validate_puzzle(puzzle: Puzzle, answer_filler: str = "-") -> ValidationResult:
    """Validate any puzzle variant."""
    if isinstance(puzzle, CrosswordPuzzle):
        return validate_crossword(puzzle)
    if isinstance(puzzle, WordSearchPuzzle):
        return validate_wordsearch(puzzle, filler=answer_filler)
    if isinstance(puzzle, SudokuPuzzle):
        return validate_sudoku(puzzle)
    if isinstance(puzzle, SoletraPuzzle):
        return validate_soletra(puzzle)
    raise TypeError(f"Unsupported puzzle type: {type(puzzle).__name__}")


def ensure_valid(puzzle: Puzzle, answer_filler: str = "-") -> ValidationResult:
    """
    Validate a puzzle and raise on any error.

    Raises:
        InvariantViolation: If the puzzle fails a structural check
    """
    result = validate_puzzle(puzzle, answer_filler=answer_filler)
    if not result.valid:
        raise InvariantViolation(
            f"{puzzle.game_type.value} puzzle failed validation:\n" +
            "\n".join(f"  - {e}" for e in result.errors)
        )
    return result

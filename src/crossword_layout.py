# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Crossword Layout Engine

Places a list of words on a free-form grid:
- Every word after the first crosses at least one placed word
- Words never run into each other end-to-end
- Horizontal and vertical counts are kept close to their targets
- Several randomized attempts are scored; the densest balanced one wins

Cells not covered by any word become blocks in the final puzzle.
"""

import logging
import random
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from config import CrosswordSettings
from models import (
    Axis, CandidateWord, CrosswordCell, CrosswordClue, CrosswordClueGroup,
    CrosswordLayout, CrosswordPuzzle, CrosswordWordRef, GridConfig, LetterGrid,
    PlacedWord, PuzzleInputError,
)


logger = logging.getLogger(__name__)

ROMAN_NUMERALS = [
    (1000, 'M'), (900, 'CM'), (500, 'D'), (400, 'CD'),
    (100, 'C'), (90, 'XC'), (50, 'L'), (40, 'XL'),
    (10, 'X'), (9, 'IX'), (5, 'V'), (4, 'IV'), (1, 'I'),
]

# Among the best-scoring positions, pick randomly from at most this many
TOP_CANDIDATES = 3


@dataclass(frozen=True)
class Placement:
    """A valid position for a word and how many letters it shares."""
    x: int
    y: int
    axis: Axis
    intersections: int


def empty_grid(width: int, height: int) -> LetterGrid:
    return [[None for _ in range(width)] for _ in range(height)]


def can_place_word(
    grid: LetterGrid,
    word: str,
    start_x: int,
    start_y: int,
    axis: Axis,
) -> bool:
    """
    Check whether ``word`` fits at (start_x, start_y) along ``axis``.

    Rules:
    - the whole run is inside the grid
    - the cells just before and after the run are empty (or off-grid)
    - occupied cells already hold the same letter
    - an empty cell may not sit between letters on both perpendicular sides

    Parallel words touching side by side are allowed.
    """
    height = len(grid)
    width = len(grid[0]) if height else 0
    dx, dy = axis.delta

    end_x = start_x + (len(word) - 1) * dx
    end_y = start_y + (len(word) - 1) * dy

    if start_x < 0 or start_y < 0 or end_x >= width or end_y >= height:
        return False

    before_x, before_y = start_x - dx, start_y - dy
    if 0 <= before_x < width and 0 <= before_y < height:
        if grid[before_y][before_x] is not None:
            return False

    after_x, after_y = end_x + dx, end_y + dy
    if 0 <= after_x < width and 0 <= after_y < height:
        if grid[after_y][after_x] is not None:
            return False

    for i, letter in enumerate(word):
        x = start_x + i * dx
        y = start_y + i * dy
        cell = grid[y][x]

        if cell is not None:
            if cell != letter:
                return False
            continue

        if axis is Axis.HORIZONTAL:
            above = grid[y - 1][x] if y > 0 else None
            below = grid[y + 1][x] if y < height - 1 else None
            if above is not None and below is not None:
                return False
        else:
            left = grid[y][x - 1] if x > 0 else None
            right = grid[y][x + 1] if x < width - 1 else None
            if left is not None and right is not None:
                return False

    return True


def count_intersections(
    grid: LetterGrid,
    word: str,
    start_x: int,
    start_y: int,
    axis: Axis,
) -> int:
    """Letters of ``word`` that coincide with letters already on the grid."""
    dx, dy = axis.delta
    count = 0
    for i, letter in enumerate(word):
        if grid[start_y + i * dy][start_x + i * dx] == letter:
            count += 1
    return count


def count_word_crossings(grid: LetterGrid, placed: PlacedWord) -> int:
    """Cells of a placed word that have a letter on a perpendicular side."""
    height = len(grid)
    width = len(grid[0]) if height else 0
    count = 0

    for x, y in placed.cells():
        if placed.axis is Axis.HORIZONTAL:
            above = grid[y - 1][x] if y > 0 else None
            below = grid[y + 1][x] if y < height - 1 else None
            if above is not None or below is not None:
                count += 1
        else:
            left = grid[y][x - 1] if x > 0 else None
            right = grid[y][x + 1] if x < width - 1 else None
            if left is not None or right is not None:
                count += 1

    return count


def find_all_placements(grid: LetterGrid, word: str) -> List[Placement]:
    """Every valid position for ``word``, horizontal ones first."""
    height = len(grid)
    width = len(grid[0]) if height else 0
    placements = []

    for y in range(height):
        for x in range(width - len(word) + 1):
            if can_place_word(grid, word, x, y, Axis.HORIZONTAL):
                placements.append(Placement(
                    x, y, Axis.HORIZONTAL,
                    count_intersections(grid, word, x, y, Axis.HORIZONTAL),
                ))

    for x in range(width):
        for y in range(height - len(word) + 1):
            if can_place_word(grid, word, x, y, Axis.VERTICAL):
                placements.append(Placement(
                    x, y, Axis.VERTICAL,
                    count_intersections(grid, word, x, y, Axis.VERTICAL),
                ))

    return placements


def place_word(grid: LetterGrid, word: str, start_x: int, start_y: int, axis: Axis):
    """Write ``word`` onto the grid."""
    dx, dy = axis.delta
    for i, letter in enumerate(word):
        grid[start_y + i * dy][start_x + i * dx] = letter


def score_layout(layout: CrosswordLayout) -> float:
    """
    Density and balance score for a finished attempt:
    filled^2 + 5*crossings + 50*min(H, V) - 10*(H - V)^2
    """
    filled = layout.filled_cells()
    crossings = sum(count_word_crossings(layout.grid, p) for p in layout.placed_words)
    h_count = layout.horizontal_count
    v_count = layout.vertical_count
    balance_bonus = min(h_count, v_count) * 50
    balance_penalty = (h_count - v_count) ** 2 * 10
    return filled * filled + crossings * 5 + balance_bonus - balance_penalty


def to_roman(number: int) -> str:
    """Convert a positive integer to uppercase roman numerals."""
    result = ""
    for value, symbol in ROMAN_NUMERALS:
        while number >= value:
            result += symbol
            number -= value
    return result


class CrosswordLayoutEngine:
    """
    Multi-attempt word placement for free-form crosswords.

    Usage:
        engine = CrosswordLayoutEngine(13, 13, 18, 18, rng=random.Random(7))
        layout = engine.layout(words)
    """

    def __init__(
        self,
        width: int,
        height: int,
        horizontal_target: int,
        vertical_target: int,
        settings: Optional[CrosswordSettings] = None,
        rng: Optional[random.Random] = None,
    ):
        self.width = width
        self.height = height
        self.horizontal_target = horizontal_target
        self.vertical_target = vertical_target
        self.settings = settings or CrosswordSettings()
        self.rng = rng or random.Random()

    @property
    def target_total(self) -> int:
        return self.horizontal_target + self.vertical_target

    def layout(self, words: Sequence[CandidateWord]) -> CrosswordLayout:
        """
        Run the placement attempts and keep the best-scoring layout.

        Args:
            words: Candidate words; unselected and too-short words are ignored

        Returns:
            Best CrosswordLayout (possibly with fewer words than targeted)
        """
        candidates = self._prepare_words(words)
        sorted_by_length = sorted(candidates, key=lambda w: len(w.word), reverse=True)

        best: Optional[CrosswordLayout] = None
        total_cells = self.width * self.height

        for attempt in range(self.settings.max_attempts):
            ordering = self._ordering(sorted_by_length, attempt)
            result = self._try_place_words(ordering)
            result.score = score_layout(result)

            logger.debug(
                f"Attempt {attempt + 1}: {len(result.placed_words)} words "
                f"({result.horizontal_count}H/{result.vertical_count}V), "
                f"score {result.score:.0f}"
            )

            if best is None or result.score > best.score:
                best = result

            density = result.filled_cells() / total_cells if total_cells else 0.0
            if (density > self.settings.early_stop_density and
                    len(result.placed_words) >= self.target_total * self.settings.early_stop_word_ratio):
                logger.debug(f"Dense layout found on attempt {attempt + 1}, stopping")
                break

        if best is None:
            best = CrosswordLayout(self.width, self.height, empty_grid(self.width, self.height))

        self._log_result(best)
        return best

    def _prepare_words(self, words: Sequence[CandidateWord]) -> List[CandidateWord]:
        """Selected, long-enough words, first occurrence of each kept."""
        seen = set()
        prepared = []
        for candidate in words:
            candidate = CandidateWord.coerce(candidate)
            if not candidate.selected:
                continue
            if len(candidate.word) < self.settings.min_word_length:
                continue
            if candidate.word in seen:
                continue
            seen.add(candidate.word)
            prepared.append(candidate)
        return prepared

    def _ordering(self, sorted_by_length: List[CandidateWord], attempt: int) -> List[CandidateWord]:
        """Longest first, shortest first, long/short interleaved, then shuffles."""
        if attempt == 0:
            return list(sorted_by_length)
        if attempt == 1:
            return list(reversed(sorted_by_length))
        if attempt == 2:
            n = len(sorted_by_length)
            interleaved = []
            for i in range((n + 1) // 2):
                interleaved.append(sorted_by_length[i])
                if n - 1 - i != i:
                    interleaved.append(sorted_by_length[n - 1 - i])
            return interleaved
        shuffled = list(sorted_by_length)
        self.rng.shuffle(shuffled)
        return shuffled

    def _try_place_words(self, words: List[CandidateWord]) -> CrosswordLayout:
        """One placement attempt over a given word ordering."""
        layout = CrosswordLayout(self.width, self.height, empty_grid(self.width, self.height))
        used = set()

        anchor = self._place_anchor(layout, words)
        if anchor is None:
            return layout
        used.add(anchor.word)

        second = self._place_crossing(layout, words, used, anchor)
        if second is not None:
            used.add(second.word)

        self._fill_passes(layout, words, used)

        h_count = layout.horizontal_count
        v_count = layout.vertical_count
        if h_count == 0 or v_count == 0:
            logger.debug(f"One-directional attempt: H={h_count}, V={v_count}")
        elif abs(h_count - v_count) > 2:
            logger.debug(f"Unbalanced attempt: H={h_count}, V={v_count}")

        return layout

    def _add(self, layout: CrosswordLayout, candidate: CandidateWord,
             x: int, y: int, axis: Axis) -> PlacedWord:
        place_word(layout.grid, candidate.word, x, y, axis)
        placed = PlacedWord(
            word=candidate.word,
            clue=candidate.clue,
            x=x,
            y=y,
            axis=axis,
            id=len(layout.placed_words) + 1,
        )
        layout.placed_words.append(placed)
        return placed

    def _place_anchor(self, layout: CrosswordLayout, words: List[CandidateWord]) -> Optional[PlacedWord]:
        """Longest word that fits, horizontally centered."""
        fitting = [w for w in words if len(w.word) <= self.width]
        if not fitting or self.height < 1:
            return None

        longest = max(len(w.word) for w in fitting)
        anchor = next(w for w in fitting if len(w.word) == longest)
        start_x = (self.width - len(anchor.word)) // 2
        start_y = self.height // 2

        if not can_place_word(layout.grid, anchor.word, start_x, start_y, Axis.HORIZONTAL):
            return None
        return self._add(layout, anchor, start_x, start_y, Axis.HORIZONTAL)

    def _place_crossing(
        self,
        layout: CrosswordLayout,
        words: List[CandidateWord],
        used: set,
        anchor: PlacedWord,
    ) -> Optional[PlacedWord]:
        """First word that can cross the anchor vertically, nearest its middle."""
        middle = anchor.x + len(anchor.word) // 2

        for candidate in words:
            if candidate.word in used:
                continue
            crossing = [
                p for p in find_all_placements(layout.grid, candidate.word)
                if p.axis is Axis.VERTICAL and p.intersections > 0
            ]
            if not crossing:
                continue
            crossing.sort(key=lambda p: abs(p.x - middle))
            chosen = crossing[0]
            return self._add(layout, candidate, chosen.x, chosen.y, chosen.axis)

        return None

    def _fill_passes(self, layout: CrosswordLayout, words: List[CandidateWord], used: set):
        """
        Repeated passes placing every word that can cross the grid,
        steering toward whichever axis is below its target.
        """
        target_h = self.horizontal_target
        target_v = self.vertical_target
        target_total = self.target_total
        passes = 0

        while len(layout.placed_words) < target_total and passes < self.settings.max_passes:
            passes += 1
            placed_before = len(layout.placed_words)

            h_count = layout.horizontal_count
            v_count = layout.vertical_count

            required_axis = None
            if h_count < target_h and v_count >= target_v:
                required_axis = Axis.HORIZONTAL
            elif v_count < target_v and h_count >= target_h:
                required_axis = Axis.VERTICAL

            preferred_axis = Axis.VERTICAL if h_count > v_count else Axis.HORIZONTAL

            for candidate in words:
                if len(layout.placed_words) >= target_total:
                    break
                if candidate.word in used:
                    continue

                with_intersection = [
                    p for p in find_all_placements(layout.grid, candidate.word)
                    if p.intersections > 0
                ]
                if not with_intersection:
                    continue

                current_h = layout.horizontal_count
                current_v = layout.vertical_count

                if current_h >= target_h:
                    options = [p for p in with_intersection if p.axis is Axis.VERTICAL]
                elif current_v >= target_v:
                    options = [p for p in with_intersection if p.axis is Axis.HORIZONTAL]
                else:
                    wanted = required_axis or preferred_axis
                    options = [p for p in with_intersection if p.axis is wanted]
                    if not options:
                        options = with_intersection

                if not options:
                    continue

                options.sort(key=lambda p: p.intersections, reverse=True)
                top_score = options[0].intersections
                top = [p for p in options if p.intersections >= top_score - 1][:TOP_CANDIDATES]
                chosen = self.rng.choice(top)

                self._add(layout, candidate, chosen.x, chosen.y, chosen.axis)
                used.add(candidate.word)

            if len(layout.placed_words) == placed_before:
                logger.debug(f"Pass {passes} placed no words, stopping")
                break

    def _log_result(self, layout: CrosswordLayout):
        total_cells = self.width * self.height
        filled = layout.filled_cells()
        h_count = layout.horizontal_count
        v_count = layout.vertical_count
        density = round(filled / total_cells * 100) if total_cells else 0

        logger.info(
            f"Crossword layout: expected {self.horizontal_target}H + "
            f"{self.vertical_target}V = {self.target_total}, "
            f"got {h_count}H + {v_count}V = {h_count + v_count}"
        )
        logger.info(
            f"   {filled} letters, {total_cells - filled} blocks "
            f"({density}% density)"
        )
        if layout.placed_words and (h_count == 0 or v_count == 0):
            logger.warning(f"One-directional crossword: H={h_count}, V={v_count}")
        elif abs(h_count - v_count) > 2:
            logger.warning(
                f"Unbalanced crossword: H={h_count}, V={v_count} "
                f"(difference {abs(h_count - v_count)})"
            )


def _position_label(start: int, length: int) -> str:
    """1-based position, or 'start-end' for a run."""
    first = start + 1
    last = first + length - 1
    return str(first) if first == last else f"{first}-{last}"


def build_crossword_puzzle(
    layout: CrosswordLayout,
    title: str,
    description: str = "",
    creator: str = "nano passatempos",
) -> CrosswordPuzzle:
    """
    Turn a layout into the exported crossword structure.

    Words get ids in reading order. Horizontal clues are numbered with
    roman numerals per row, vertical clues with arabic numerals per column;
    further words on the same row or column are numbered '-'.
    """
    width, height = layout.width, layout.height

    cells = []
    for y in range(height):
        for x in range(width):
            letter = layout.grid[y][x]
            if letter is not None:
                cells.append(CrosswordCell(x=str(x + 1), y=str(y + 1), solution=letter))
            else:
                cells.append(CrosswordCell(x=str(x + 1), y=str(y + 1), is_block=True))

    ordered = sorted(layout.placed_words, key=lambda p: (p.y, p.x))
    ordered = [replace(p, id=i + 1) for i, p in enumerate(ordered)]

    word_refs = []
    for placed in ordered:
        if placed.axis is Axis.HORIZONTAL:
            word_refs.append(CrosswordWordRef(
                id=str(placed.id),
                x=_position_label(placed.x, len(placed.word)),
                y=str(placed.y + 1),
            ))
        else:
            word_refs.append(CrosswordWordRef(
                id=str(placed.id),
                x=str(placed.x + 1),
                y=_position_label(placed.y, len(placed.word)),
            ))

    vertical = sorted(
        (p for p in ordered if p.axis is Axis.VERTICAL), key=lambda p: (p.x, p.y)
    )
    horizontal = sorted(
        (p for p in ordered if p.axis is Axis.HORIZONTAL), key=lambda p: (p.y, p.x)
    )

    vertical_clues = []
    v_number = 1
    last_col = -1
    for placed in vertical:
        if placed.x != last_col:
            number = str(v_number)
            v_number += 1
            last_col = placed.x
        else:
            number = '-'
        vertical_clues.append(CrosswordClue(
            word=str(placed.id), number=number,
            format=str(len(placed.word)), value=placed.clue,
        ))

    horizontal_clues = []
    h_number = 1
    last_row = -1
    for placed in horizontal:
        if placed.y != last_row:
            number = to_roman(h_number)
            h_number += 1
            last_row = placed.y
        else:
            number = '-'
        horizontal_clues.append(CrosswordClue(
            word=str(placed.id), number=number,
            format=str(len(placed.word)), value=placed.clue,
        ))

    groups = []
    if vertical_clues:
        groups.append(CrosswordClueGroup(title='Vertical', clues=vertical_clues))
    if horizontal_clues:
        groups.append(CrosswordClueGroup(title='Horizontal', clues=horizontal_clues))

    return CrosswordPuzzle(
        title=title,
        description=description,
        width=width,
        height=height,
        cells=cells,
        words=word_refs,
        clue_groups=groups,
        placed_words=ordered,
        creator=creator,
        copyright=f"{datetime.now().year} {creator}",
    )


def generate_crossword(
    words: Sequence[CandidateWord],
    grid_config: GridConfig,
    title: str,
    description: str = "",
    settings: Optional[CrosswordSettings] = None,
    rng: Optional[random.Random] = None,
) -> CrosswordPuzzle:
    """
    Lay out ``words`` on the configured grid and build the puzzle.

    Raises:
        PuzzleInputError: If no selected word is long enough to place
    """
    settings = settings or CrosswordSettings()
    usable = [
        w for w in (CandidateWord.coerce(c) for c in words)
        if w.selected and len(w.word) >= settings.min_word_length
    ]
    if not usable:
        raise PuzzleInputError(
            f"No selected words with at least {settings.min_word_length} letters"
        )

    target_h = grid_config.horizontal_words
    target_v = grid_config.vertical_words
    if target_h is None or target_v is None:
        # Split the maximum word count evenly when no axis targets are given
        target_h = (grid_config.max_words + 1) // 2
        target_v = grid_config.max_words // 2

    engine = CrosswordLayoutEngine(
        width=grid_config.width,
        height=grid_config.height,
        horizontal_target=target_h,
        vertical_target=target_v,
        settings=settings,
        rng=rng,
    )
    layout = engine.layout(usable)
    return build_crossword_puzzle(layout, title, description)

# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Word-search grid packer.

Words are dropped at random positions along four directions; letters may be
shared when they match. Words that find no spot within the attempt cap are
left out and reported in ``dropped_words``.
"""

import logging
import random
import string
from typing import List, Optional, Sequence, Union

from config import WordSearchSettings
from models import (
    CandidateWord, SearchDirection, WordPlacement, WordSearchPuzzle,
)


logger = logging.getLogger(__name__)

DIRECTIONS = list(SearchDirection)
FILL_LETTERS = string.ascii_uppercase


def start_ranges(word: str, width: int, height: int, direction: SearchDirection):
    """
    Valid (row, col) start ranges for ``word`` in ``direction``.

    Returns None when the word cannot fit in that direction at all.
    """
    span = len(word) - 1

    if direction.dy:
        rows = range(0, height - span)
    else:
        rows = range(0, height)

    if direction.dx > 0:
        cols = range(0, width - span)
    elif direction.dx < 0:
        cols = range(span, width)
    else:
        cols = range(0, width)

    if len(rows) == 0 or len(cols) == 0:
        return None
    return rows, cols


def can_place(grid: List[List[Optional[str]]], word: str, row: int, col: int,
              direction: SearchDirection) -> bool:
    """Every covered cell is in bounds and empty or holding the same letter."""
    height = len(grid)
    width = len(grid[0]) if height else 0
    for i, letter in enumerate(word):
        r = row + i * direction.dy
        c = col + i * direction.dx
        if not (0 <= r < height and 0 <= c < width):
            return False
        if grid[r][c] is not None and grid[r][c] != letter:
            return False
    return True


class WordSearchPacker:
    """
    Random-retry packer for word-search grids.

    Usage:
        packer = WordSearchPacker(10, 10, rng=random.Random(3))
        puzzle = packer.pack(["GATO", "CASA", "SOL"], title="Animais")
    """

    def __init__(
        self,
        width: int,
        height: int,
        settings: Optional[WordSearchSettings] = None,
        rng: Optional[random.Random] = None,
    ):
        self.width = width
        self.height = height
        self.settings = settings or WordSearchSettings()
        self.rng = rng or random.Random()

    def _try_place(self, grid, word: str) -> Optional[WordPlacement]:
        for _ in range(self.settings.max_placement_attempts):
            direction = self.rng.choice(DIRECTIONS)
            ranges = start_ranges(word, self.width, self.height, direction)
            if ranges is None:
                continue
            rows, cols = ranges
            row = self.rng.choice(rows)
            col = self.rng.choice(cols)
            if can_place(grid, word, row, col, direction):
                return WordPlacement(word=word, row=row, col=col, direction=direction)
        return None

    def pack(
        self,
        words: Sequence[Union[str, CandidateWord]],
        title: str = "",
        description: str = "",
    ) -> WordSearchPuzzle:
        """
        Place ``words`` and fill the rest of the grid.

        Args:
            words: Words (plain or CandidateWord); unselected ones are skipped
            title: Puzzle title
            description: Puzzle description

        Returns:
            WordSearchPuzzle with content/answer rows and the placed subset
        """
        grid: List[List[Optional[str]]] = [
            [None] * self.width for _ in range(self.height)
        ]
        placements: List[WordPlacement] = []
        dropped: List[str] = []
        seen = set()

        for candidate in words:
            candidate = CandidateWord.coerce(candidate)
            word = candidate.word
            if not candidate.selected or not word or word in seen:
                continue
            seen.add(word)

            placement = self._try_place(grid, word)
            if placement is None:
                logger.warning(
                    f"Could not place '{word}' after "
                    f"{self.settings.max_placement_attempts} attempts, dropping it"
                )
                dropped.append(word)
                continue

            for (r, c), letter in zip(placement.cells(), word):
                grid[r][c] = letter
            placements.append(placement)
            logger.debug(
                f"Placed {word} at ({placement.row}, {placement.col}) "
                f"{placement.direction.name.lower()}"
            )

        content = []
        answer = []
        filler = self.settings.answer_filler
        for row in grid:
            content.append(' '.join(
                cell if cell is not None else self.rng.choice(FILL_LETTERS)
                for cell in row
            ))
            answer.append(' '.join(
                cell if cell is not None else filler
                for cell in row
            ))

        logger.info(
            f"Word search {self.width}x{self.height}: placed {len(placements)} words"
            + (f", dropped {len(dropped)}" if dropped else "")
        )

        return WordSearchPuzzle(
            title=title,
            description=description,
            content=content,
            answer=answer,
            placed_words=[p.word for p in placements],
            placements=placements,
            dropped_words=dropped,
        )


def pack(
    words: Sequence[Union[str, CandidateWord]],
    width: int,
    height: int,
    settings: Optional[WordSearchSettings] = None,
    rng: Optional[random.Random] = None,
    title: str = "",
    description: str = "",
) -> WordSearchPuzzle:
    """Convenience wrapper around WordSearchPacker."""
    packer = WordSearchPacker(width, height, settings=settings, rng=rng)
    return packer.pack(words, title=title, description=description)

# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Data models for the puzzle generators.

Each game type has its own puzzle record; they share a ``game_type``
discriminator and a ``to_dict()`` that produces the exported shape.
"""

import re
import unicodedata
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, FrozenSet, List, Optional, Tuple, Union


class PuzzleError(Exception):
    """Base exception for puzzle generation failures."""
    pass


class PuzzleInputError(PuzzleError):
    """Raised when the candidate words or letters cannot produce a puzzle."""
    pass


class InvariantViolation(PuzzleError):
    """Raised when a generated puzzle fails its structural checks."""
    pass


class GameType(Enum):
    CROSSWORD = "crossword"
    WORDSEARCH = "wordsearch"
    SUDOKU = "sudoku"
    SOLETRA = "soletra"


class Difficulty(Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, value: Union[str, 'Difficulty']) -> 'Difficulty':
        """Accept either an enum member or its (case-insensitive) value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise PuzzleInputError(
                f"Unknown difficulty '{value}'. "
                f"Must be one of: {[d.value for d in cls]}"
            )


class Axis(Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"

    @property
    def delta(self) -> Tuple[int, int]:
        """(dx, dy) step along the axis."""
        return (1, 0) if self is Axis.HORIZONTAL else (0, 1)


class SearchDirection(Enum):
    """Word-search directions as (dy, dx)."""
    RIGHT = (0, 1)
    DOWN = (1, 0)
    DOWN_RIGHT = (1, 1)
    DOWN_LEFT = (1, -1)

    @property
    def dy(self) -> int:
        return self.value[0]

    @property
    def dx(self) -> int:
        return self.value[1]


@dataclass(frozen=True)
class GridConfig:
    """Sizing parameters for one puzzle request."""
    width: int
    height: int
    min_words: int
    max_words: int
    horizontal_words: Optional[int] = None
    vertical_words: Optional[int] = None
    estimated_time: int = 0  # minutes


@dataclass(frozen=True)
class WordLimits:
    """Soletra word-count bounds for a difficulty."""
    min: int
    max: int
    target: int


@dataclass
class CandidateWord:
    """A word offered to a generator, with its optional clue."""
    word: str
    clue: str = ""
    selected: bool = True

    def __post_init__(self):
        self.word = normalize_word(self.word)

    @classmethod
    def coerce(cls, value: Union[str, Dict[str, Any], 'CandidateWord']) -> 'CandidateWord':
        """Build a candidate from a plain string, a mapping or a candidate."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls(word=value)
        return cls(
            word=str(value.get('word', '')),
            clue=str(value.get('clue', '') or ''),
            selected=bool(value.get('selected', True)),
        )


@dataclass
class PlacedWord:
    """A word placed on a crossword grid. ``x``/``y`` are 0-based."""
    word: str
    clue: str
    x: int
    y: int
    axis: Axis
    id: int = 0

    @property
    def end_x(self) -> int:
        return self.x + (len(self.word) - 1 if self.axis is Axis.HORIZONTAL else 0)

    @property
    def end_y(self) -> int:
        return self.y + (len(self.word) - 1 if self.axis is Axis.VERTICAL else 0)

    def cells(self) -> List[Tuple[int, int]]:
        """(x, y) of every cell the word covers."""
        dx, dy = self.axis.delta
        return [(self.x + i * dx, self.y + i * dy) for i in range(len(self.word))]


# A crossword working grid: rows of letters, None for an empty cell.
LetterGrid = List[List[Optional[str]]]


@dataclass
class CrosswordLayout:
    """Result of one layout search: the letter grid and placed words."""
    width: int
    height: int
    grid: LetterGrid
    placed_words: List[PlacedWord] = field(default_factory=list)
    score: float = 0.0

    @property
    def horizontal_count(self) -> int:
        return sum(1 for p in self.placed_words if p.axis is Axis.HORIZONTAL)

    @property
    def vertical_count(self) -> int:
        return sum(1 for p in self.placed_words if p.axis is Axis.VERTICAL)

    def filled_cells(self) -> int:
        return sum(1 for row in self.grid for cell in row if cell is not None)

    def density(self) -> float:
        total = self.width * self.height
        return self.filled_cells() / total if total else 0.0


@dataclass
class CrosswordCell:
    """Exported crossword cell; coordinates are 1-based strings."""
    x: str
    y: str
    solution: Optional[str] = None
    is_block: bool = False

    def to_dict(self) -> Dict[str, str]:
        if self.is_block:
            return {'x': self.x, 'y': self.y, 'type': 'block'}
        return {'x': self.x, 'y': self.y, 'solution': self.solution}


@dataclass
class CrosswordWordRef:
    """Exported word position, e.g. x='3-7', y='5'."""
    id: str
    x: str
    y: str

    def to_dict(self) -> Dict[str, str]:
        return {'id': self.id, 'x': self.x, 'y': self.y}


@dataclass
class CrosswordClue:
    word: str    # id of the referenced word
    number: str  # roman / arabic numeral, or '-' for the same row/column
    format: str  # word length
    value: str   # clue text

    def to_dict(self) -> Dict[str, str]:
        return {
            'word': self.word,
            'number': self.number,
            'format': self.format,
            'value': self.value,
        }


@dataclass
class CrosswordClueGroup:
    title: str  # 'Vertical' or 'Horizontal'
    clues: List[CrosswordClue] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {'title': self.title, 'clue': [c.to_dict() for c in self.clues]}


@dataclass
class CrosswordPuzzle:
    """Complete crossword with grid, word positions and clue groups."""
    game_type: ClassVar[GameType] = GameType.CROSSWORD

    title: str
    description: str
    width: int
    height: int
    cells: List[CrosswordCell]
    words: List[CrosswordWordRef]
    clue_groups: List[CrosswordClueGroup]
    placed_words: List[PlacedWord] = field(default_factory=list)
    creator: str = "nano passatempos"
    copyright: str = ""

    def cell_at(self, x: int, y: int) -> CrosswordCell:
        """Cell at 0-based (x, y)."""
        return self.cells[y * self.width + x]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'gameType': self.game_type.value,
            'metadata': {
                'title': self.title,
                'creator': self.creator,
                'copyright': self.copyright,
                'description': self.description,
            },
            'grid': {
                'width': self.width,
                'height': self.height,
                'cell': [c.to_dict() for c in self.cells],
            },
            'word': [w.to_dict() for w in self.words],
            'clues': [g.to_dict() for g in self.clue_groups],
        }


@dataclass
class WordPlacement:
    """Where a word-search word starts (0-based row/col) and its direction."""
    word: str
    row: int
    col: int
    direction: SearchDirection

    def cells(self) -> List[Tuple[int, int]]:
        """(row, col) of every cell the word covers."""
        return [
            (self.row + i * self.direction.dy, self.col + i * self.direction.dx)
            for i in range(len(self.word))
        ]


@dataclass
class WordSearchPuzzle:
    game_type: ClassVar[GameType] = GameType.WORDSEARCH

    title: str
    description: str
    content: List[str]       # space-joined letters per row
    answer: List[str]        # same, non-word cells shown as '-'
    placed_words: List[str]
    placements: List[WordPlacement] = field(default_factory=list)
    dropped_words: List[str] = field(default_factory=list)

    @property
    def dropped_count(self) -> int:
        return len(self.dropped_words)

    def content_grid(self) -> List[List[str]]:
        return [row.split(' ') for row in self.content]

    def answer_grid(self) -> List[List[str]]:
        return [row.split(' ') for row in self.answer]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'gameType': self.game_type.value,
            'name': self.title,
            'description': self.description,
            'content': list(self.content),
            'answer': list(self.answer),
            'suggestions': list(self.placed_words),
            'droppedWords': list(self.dropped_words),
        }


SudokuCell = Optional[int]  # None = empty, 1-9 = digit


@dataclass
class SudokuPuzzle:
    game_type: ClassVar[GameType] = GameType.SUDOKU

    title: str
    difficulty: Difficulty
    grid: List[List[SudokuCell]]
    solution: List[List[int]]
    clue_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'gameType': self.game_type.value,
            'name': self.title,
            'difficulty': self.difficulty.value,
            'grid': [list(row) for row in self.grid],
            'solution': [list(row) for row in self.solution],
            'clueCount': self.clue_count,
        }


@dataclass
class SoletraRankings:
    beginner: int
    good: int
    great: int
    amazing: int
    genius: int

    def to_dict(self) -> Dict[str, int]:
        return {
            'beginner': self.beginner,
            'good': self.good,
            'great': self.great,
            'amazing': self.amazing,
            'genius': self.genius,
        }


@dataclass
class SoletraPuzzle:
    game_type: ClassVar[GameType] = GameType.SOLETRA

    title: str
    difficulty: Difficulty
    letters: List[str]        # center letter first
    center_letter: str
    valid_words: List[str]
    pangrams: List[str]
    max_score: int
    rankings: SoletraRankings

    def to_dict(self) -> Dict[str, Any]:
        return {
            'gameType': self.game_type.value,
            'name': self.title,
            'difficulty': self.difficulty.value,
            'letters': list(self.letters),
            'centerLetter': self.center_letter,
            'validWords': list(self.valid_words),
            'pangrams': list(self.pangrams),
            'maxScore': self.max_score,
            'rankings': self.rankings.to_dict(),
        }


Puzzle = Union[CrosswordPuzzle, WordSearchPuzzle, SudokuPuzzle, SoletraPuzzle]


def puzzle_from_dict(data: Dict[str, Any]) -> Puzzle:
    """Rebuild a puzzle from the dict produced by its ``to_dict()``."""
    try:
        game_type = GameType(data.get('gameType'))
    except ValueError:
        raise PuzzleInputError(f"Unknown game type: {data.get('gameType')!r}")

    if game_type is GameType.CROSSWORD:
        cells = [
            CrosswordCell(
                x=c['x'], y=c['y'],
                solution=c.get('solution'),
                is_block=c.get('type') == 'block',
            )
            for c in data['grid']['cell']
        ]
        return CrosswordPuzzle(
            title=data['metadata']['title'],
            description=data['metadata'].get('description', ''),
            width=data['grid']['width'],
            height=data['grid']['height'],
            cells=cells,
            words=[CrosswordWordRef(**w) for w in data['word']],
            clue_groups=[
                CrosswordClueGroup(
                    title=g['title'],
                    clues=[CrosswordClue(**c) for c in g['clue']],
                )
                for g in data['clues']
            ],
            creator=data['metadata'].get('creator', ''),
            copyright=data['metadata'].get('copyright', ''),
        )

    if game_type is GameType.WORDSEARCH:
        return WordSearchPuzzle(
            title=data['name'],
            description=data.get('description', ''),
            content=list(data['content']),
            answer=list(data['answer']),
            placed_words=list(data['suggestions']),
            dropped_words=list(data.get('droppedWords', [])),
        )

    if game_type is GameType.SUDOKU:
        return SudokuPuzzle(
            title=data['name'],
            difficulty=Difficulty.parse(data['difficulty']),
            grid=[list(row) for row in data['grid']],
            solution=[list(row) for row in data['solution']],
            clue_count=data['clueCount'],
        )

    return SoletraPuzzle(
        title=data['name'],
        difficulty=Difficulty.parse(data['difficulty']),
        letters=list(data['letters']),
        center_letter=data['centerLetter'],
        valid_words=list(data['validWords']),
        pangrams=list(data['pangrams']),
        max_score=data['maxScore'],
        rankings=SoletraRankings(**data['rankings']),
    )


# Normalization utilities
_NON_LETTERS = re.compile(r"[^A-Z]")


def normalize_word(word: str) -> str:
    """
    Normalize a word for lookups and grids.
    Uppercases, strips diacritics and drops anything outside A-Z.
    Example: 'Ação-Já' -> 'ACAOJA'
    """
    decomposed = unicodedata.normalize('NFD', word.upper())
    stripped = ''.join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _NON_LETTERS.sub('', stripped)


def letter_set(word: str) -> FrozenSet[str]:
    """Distinct letters of an already-normalized word."""
    return frozenset(word)

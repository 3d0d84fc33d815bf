#!/usr/bin/env python3
# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Puzzle Generator

Generates crossword, word-search, Sudoku and Soletra puzzles:
1. Crossword layout from a word list with clues
2. Word-search packing in four directions
3. Unique-solution Sudoku for a difficulty
4. Soletra from fixed letters or letters derived from a theme

Every puzzle is validated before it is returned and written to stdout as
YAML or JSON.

Usage:
    # Word search from a word list:
    python puzzle_generator.py --game wordsearch --words GATO,CASA,SOL

    # Crossword from a word file with clues:
    python puzzle_generator.py --game crossword --words-file palavras.txt

    # With YAML configuration:
    python puzzle_generator.py --config puzzle.yaml --seed 42
"""

import json
import logging
import os
import random
import re
import sys
import time
from typing import List, Optional, Sequence

import yaml

# Add src to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import (
    ConfigValidationError, GeneratorConfig, create_argument_parser, load_config,
)
from crossword_layout import generate_crossword
from dictionary_index import DictionaryProvider
from logging_config import setup_logging
from models import (
    CandidateWord, GameType, Puzzle, PuzzleError, PuzzleInputError, normalize_word,
)
from soletra import SoletraGenerator
from sudoku_generator import SudokuGenerator
from validator import ensure_valid
from wordsearch import WordSearchPacker


logger = logging.getLogger(__name__)

_THEME_SPLIT = re.compile(r"[\s,;]+")


def load_word_file(path: str) -> List[CandidateWord]:
    """
    Read candidate words from a file.

    Accepts a YAML list (of strings or ``{word, clue}`` mappings) or plain
    text with one ``WORD`` or ``WORD;clue`` per line.

    Raises:
        OSError: If the file cannot be read
    """
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError:
        data = None

    if isinstance(data, list):
        words = [CandidateWord.coerce(item) for item in data if item]
    else:
        words = []
        for line in text.splitlines():
            line = line.strip()
            if not line or line.startswith('#'):
                continue
            word, _, clue = line.partition(';')
            words.append(CandidateWord(word=word.strip(), clue=clue.strip()))

    words = [w for w in words if w.word]
    logger.debug(f"Loaded {len(words)} words from {path}")
    return words


def theme_words_from(text: str, words: Sequence = ()) -> List[str]:
    """Theme words from free text plus any candidate words."""
    result = [t for t in _THEME_SPLIT.split(text or '') if normalize_word(t)]
    result.extend(CandidateWord.coerce(w).word for w in words)
    return [w for w in result if w]


class PuzzleGenerator:
    """
    Runs one puzzle request end to end.

    Workflow:
    1. Collect candidate words (or letters for Soletra)
    2. Run the engine for the configured game type
    3. Validate the result (bugs raise InvariantViolation)
    4. Log summary stats
    """

    def __init__(
        self,
        config: GeneratorConfig,
        dictionary: Optional[DictionaryProvider] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Args:
            config: Resolved configuration
            dictionary: Shared dictionary provider for Soletra; built from
                        ``config.dictionary_path`` on first use when omitted
            rng: Random source; seeded from ``config.seed`` when omitted
        """
        self.config = config
        self.rng = rng or random.Random(config.seed)
        self._dictionary = dictionary
        self.logger = logging.getLogger(__name__)

    @property
    def dictionary(self) -> DictionaryProvider:
        if self._dictionary is None:
            self._dictionary = DictionaryProvider(self.config.dictionary_path)
        return self._dictionary

    def generate(self, words: Optional[Sequence] = None) -> Puzzle:
        """
        Generate and validate a puzzle.

        Args:
            words: Candidate words; ``config.words`` when omitted

        Returns:
            The puzzle record for the configured game type

        Raises:
            PuzzleInputError: If the request cannot produce a puzzle
            InvariantViolation: If the produced puzzle fails validation
        """
        start_time = time.time()
        config = self.config
        game_type = GameType(config.game_type)
        grid_config = config.grid_config()

        self.logger.info("=" * 60)
        self.logger.info(f"{game_type.value.upper()} GENERATOR")
        self.logger.info("=" * 60)
        self.logger.info(f"   Title: {config.title}")
        self.logger.info(f"   Difficulty: {config.difficulty}")
        if game_type in (GameType.CROSSWORD, GameType.WORDSEARCH):
            self.logger.info(f"   Size: {grid_config.width}x{grid_config.height}")
        if config.seed is not None:
            self.logger.info(f"   Seed: {config.seed}")

        candidates = list(words if words is not None else config.words)

        if game_type is GameType.CROSSWORD:
            puzzle = self._generate_crossword(candidates)
        elif game_type is GameType.WORDSEARCH:
            puzzle = self._generate_wordsearch(candidates)
        elif game_type is GameType.SUDOKU:
            puzzle = SudokuGenerator(config.sudoku, self.rng).generate(
                config.difficulty, title=config.title
            )
        else:
            puzzle = self._generate_soletra(candidates)

        result = ensure_valid(puzzle, answer_filler=config.wordsearch.answer_filler)
        for warning in result.warnings:
            self.logger.warning(warning)

        elapsed = time.time() - start_time
        self.logger.info("=" * 60)
        self.logger.info("GENERATION COMPLETE!")
        self.logger.info("=" * 60)
        for key, value in result.stats.items():
            self.logger.info(f"   {key}: {value}")
        self.logger.info(f"Generation time: {elapsed:.2f} seconds")

        return puzzle

    def _selected(self, candidates: Sequence) -> List[CandidateWord]:
        selected = [
            w for w in (CandidateWord.coerce(c) for c in candidates)
            if w.selected and w.word
        ]
        if not selected:
            raise PuzzleInputError(f"No words given for {self.config.game_type}")
        return selected

    def _generate_crossword(self, candidates: Sequence):
        words = self._selected(candidates)
        self.logger.info(f"Step 1: Laying out {len(words)} words...")
        return generate_crossword(
            words,
            self.config.grid_config(),
            title=self.config.title,
            description=self.config.description,
            settings=self.config.crossword,
            rng=self.rng,
        )

    def _generate_wordsearch(self, candidates: Sequence):
        words = self._selected(candidates)
        grid_config = self.config.grid_config()
        if len(words) > grid_config.max_words:
            self.logger.info(
                f"Using the first {grid_config.max_words} of {len(words)} words"
            )
            words = words[:grid_config.max_words]

        self.logger.info(f"Step 1: Packing {len(words)} words...")
        packer = WordSearchPacker(
            grid_config.width, grid_config.height,
            settings=self.config.wordsearch, rng=self.rng,
        )
        return packer.pack(
            words, title=self.config.title, description=self.config.description
        )

    def _generate_soletra(self, candidates: Sequence):
        config = self.config
        self.logger.info("Step 1: Loading dictionary...")
        index = self.dictionary.get()
        self.logger.info(f"   - {len(index)} dictionary words")

        generator = SoletraGenerator(index, settings=config.soletra, rng=self.rng)
        themes = theme_words_from(config.theme, candidates)

        if config.letters:
            self.logger.info("Step 2: Building puzzle from fixed letters...")
            return generator.build_puzzle(
                config.letters, config.center_letter,
                difficulty=config.difficulty, title=config.title,
                theme_words=themes,
            )

        if themes:
            self.logger.info(f"Step 2: Deriving letters from {len(themes)} theme words...")
            return generator.generate_from_theme(
                themes, difficulty=config.difficulty, title=config.title
            )

        self.logger.warning("No letters or theme given, using the fallback letters")
        return generator.build_puzzle(
            config.soletra.fallback_letters, config.soletra.fallback_center,
            difficulty=config.difficulty, title=config.title,
        )


def format_puzzle(puzzle: Puzzle, output_format: str = "yaml") -> str:
    """Serialize a puzzle as YAML or JSON."""
    data = puzzle.to_dict()
    if output_format == "json":
        return json.dumps(data, ensure_ascii=False, indent=2)
    return yaml.safe_dump(data, allow_unicode=True, sort_keys=False)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    try:
        # Load configuration
        config = load_config(args)

        if getattr(args, 'words_file', None):
            config.words = list(config.words) + load_word_file(args.words_file)

        # Handle dry-run
        if getattr(args, 'dry_run', False):
            grid_config = config.grid_config()
            print("Configuration valid:")
            print(f"  Game: {config.game_type}")
            print(f"  Difficulty: {config.difficulty}")
            print(f"  Title: {config.title}")
            print(f"  Grid: {grid_config.width}x{grid_config.height}")
            print(f"  Words: {len(config.words)}")
            print(f"  Output Format: {config.output.format}")
            return 0

        setup_logging(
            log_level=config.output.log_level,
            log_directory=config.output.log_directory,
            log_file_prefix=config.output.log_file_prefix,
            enable_console=config.output.enable_console_logging,
        )

        generator = PuzzleGenerator(config)
        puzzle = generator.generate()
        sys.stdout.write(format_puzzle(puzzle, config.output.format))
        if config.output.format == "json":
            sys.stdout.write("\n")
        return 0

    except ConfigValidationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Could not read input: {e}", file=sys.stderr)
        return 1
    except PuzzleError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nGeneration cancelled.", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())

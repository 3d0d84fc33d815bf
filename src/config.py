# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Configuration module for the puzzle generators.

Handles loading configuration from YAML files and command-line arguments,
with proper merging and validation.
"""

import argparse
import os
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from models import GameType, Difficulty, GridConfig, WordLimits, normalize_word


# Bundled word list used by Soletra when no dictionary is configured
DEFAULT_DICTIONARY_PATH = os.path.join(
    os.path.dirname(os.path.abspath(__file__)), "puzzle_data", "palavras_sample.txt"
)

VALID_GAME_TYPES = [g.value for g in GameType]
VALID_DIFFICULTIES = [d.value for d in Difficulty]
VALID_OUTPUT_FORMATS = ["yaml", "json"]
VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Grid sizing per game type and difficulty.
# Crosswords use large grids to maximise letter density; for Sudoku the
# word counts are clue counts and for Soletra valid-word counts.
GRID_CONFIGS: Dict[str, Dict[str, GridConfig]] = {
    "crossword": {
        "easy": GridConfig(9, 9, 12, 16, horizontal_words=7, vertical_words=7, estimated_time=5),
        "medium": GridConfig(13, 13, 30, 40, horizontal_words=18, vertical_words=18, estimated_time=12),
        "hard": GridConfig(17, 17, 50, 65, horizontal_words=30, vertical_words=30, estimated_time=20),
    },
    "wordsearch": {
        "easy": GridConfig(10, 10, 5, 7, estimated_time=3),
        "medium": GridConfig(12, 12, 8, 10, estimated_time=6),
        "hard": GridConfig(15, 15, 12, 15, estimated_time=10),
    },
    "sudoku": {
        "easy": GridConfig(9, 9, 35, 40, estimated_time=8),
        "medium": GridConfig(9, 9, 28, 34, estimated_time=15),
        "hard": GridConfig(9, 9, 22, 27, estimated_time=25),
    },
    "soletra": {
        "easy": GridConfig(7, 7, 15, 25, estimated_time=5),
        "medium": GridConfig(7, 7, 25, 40, estimated_time=10),
        "hard": GridConfig(7, 7, 40, 60, estimated_time=15),
    },
}

# Valid-word bounds used when building a Soletra puzzle from a dictionary
SOLETRA_WORD_LIMITS: Dict[str, WordLimits] = {
    "easy": WordLimits(min=20, max=35, target=25),
    "medium": WordLimits(min=35, max=55, target=45),
    "hard": WordLimits(min=50, max=70, target=60),
}


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""
    pass


def get_grid_config(game_type: str, difficulty: str) -> GridConfig:
    """Look up the default grid configuration for a game and difficulty."""
    try:
        return GRID_CONFIGS[game_type][difficulty]
    except KeyError:
        raise ConfigValidationError(
            f"No grid configuration for {game_type}/{difficulty}"
        )


def get_word_limits(difficulty: str) -> WordLimits:
    """Soletra word limits, defaulting to medium like the web API did."""
    return SOLETRA_WORD_LIMITS.get(difficulty, SOLETRA_WORD_LIMITS["medium"])


@dataclass
class CrosswordSettings:
    """Search caps for the crossword layout engine."""
    max_attempts: int = 10
    max_passes: int = 5
    early_stop_density: float = 0.85
    early_stop_word_ratio: float = 0.8
    min_word_length: int = 3


@dataclass
class WordSearchSettings:
    """Placement caps for the word-search packer."""
    max_placement_attempts: int = 100
    answer_filler: str = "-"


@dataclass
class SudokuSettings:
    """Cell-removal caps for the Sudoku engine."""
    max_failed_removals: int = 100
    solution_limit: int = 2


@dataclass
class SoletraSettings:
    """Letter-set rules for the Soletra engine."""
    min_word_length: int = 4
    fallback_letters: List[str] = field(
        default_factory=lambda: ["A", "E", "R", "S", "T", "O", "I"]
    )
    fallback_center: str = "A"
    max_letter_attempts: int = 500


@dataclass
class OutputConfig:
    """Configuration for output and logging."""
    format: str = "yaml"
    log_level: str = "INFO"
    log_directory: Optional[str] = None
    log_file_prefix: str = "puzzle_generator"
    enable_console_logging: bool = True


@dataclass
class GeneratorConfig:
    """Complete configuration for a puzzle request."""
    # Puzzle settings
    game_type: str = "crossword"
    difficulty: str = "medium"
    title: str = "Passatempo"
    description: str = ""
    theme: str = ""
    words: List[Any] = field(default_factory=list)
    letters: List[str] = field(default_factory=list)
    center_letter: Optional[str] = None
    dictionary_path: str = DEFAULT_DICTIONARY_PATH
    seed: Optional[int] = None

    # Grid overrides (fall back to GRID_CONFIGS)
    width: Optional[int] = None
    height: Optional[int] = None
    horizontal_words: Optional[int] = None
    vertical_words: Optional[int] = None

    # Sub-configurations
    crossword: CrosswordSettings = field(default_factory=CrosswordSettings)
    wordsearch: WordSearchSettings = field(default_factory=WordSearchSettings)
    sudoku: SudokuSettings = field(default_factory=SudokuSettings)
    soletra: SoletraSettings = field(default_factory=SoletraSettings)
    output: OutputConfig = field(default_factory=OutputConfig)

    def __post_init__(self):
        """Convert dicts to dataclass instances if needed."""
        if isinstance(self.crossword, dict):
            self.crossword = CrosswordSettings(**self.crossword)
        if isinstance(self.wordsearch, dict):
            self.wordsearch = WordSearchSettings(**self.wordsearch)
        if isinstance(self.sudoku, dict):
            self.sudoku = SudokuSettings(**self.sudoku)
        if isinstance(self.soletra, dict):
            self.soletra = SoletraSettings(**self.soletra)
        if isinstance(self.output, dict):
            self.output = OutputConfig(**self.output)
        self.game_type = str(self.game_type).lower()
        self.difficulty = str(self.difficulty).lower()
        self.letters = [normalize_word(l) for l in self.letters]
        if self.center_letter:
            self.center_letter = normalize_word(self.center_letter)

    def grid_config(self) -> GridConfig:
        """
        Effective grid configuration: defaults for the game and difficulty
        with any explicit overrides applied.
        """
        base = get_grid_config(self.game_type, self.difficulty)
        return GridConfig(
            width=self.width or base.width,
            height=self.height or base.height,
            min_words=base.min_words,
            max_words=base.max_words,
            horizontal_words=self.horizontal_words or base.horizontal_words,
            vertical_words=self.vertical_words or base.vertical_words,
            estimated_time=base.estimated_time,
        )

    def word_limits(self) -> WordLimits:
        return get_word_limits(self.difficulty)

    @classmethod
    def from_yaml(cls, path: str) -> 'GeneratorConfig':
        """
        Load configuration from a YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            GeneratorConfig instance

        Raises:
            ConfigValidationError: If file doesn't exist or is invalid
        """
        path = Path(path)
        if not path.exists():
            raise ConfigValidationError(f"Configuration file not found: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"Invalid YAML in {path}: {e}")

        if not isinstance(data, dict):
            raise ConfigValidationError(
                f"Configuration file must contain a YAML mapping, got {type(data)}"
            )

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> 'GeneratorConfig':
        """Create GeneratorConfig from dictionary."""
        # Handle nested 'puzzle' key
        puzzle_data = data.get('puzzle', {}) or {}
        grid_data = data.get('grid', {}) or {}
        default = cls()

        try:
            config = cls(
                game_type=puzzle_data.get('game_type', default.game_type),
                difficulty=puzzle_data.get('difficulty', default.difficulty),
                title=puzzle_data.get('title', default.title),
                description=puzzle_data.get('description', default.description),
                theme=puzzle_data.get('theme', default.theme),
                words=puzzle_data.get('words', []) or [],
                letters=puzzle_data.get('letters', []) or [],
                center_letter=puzzle_data.get('center_letter'),
                dictionary_path=puzzle_data.get(
                    'dictionary_path', default.dictionary_path
                ),
                seed=puzzle_data.get('seed'),
                width=grid_data.get('width'),
                height=grid_data.get('height'),
                horizontal_words=grid_data.get('horizontal_words'),
                vertical_words=grid_data.get('vertical_words'),
                crossword=data.get('crossword', {}) or {},
                wordsearch=data.get('wordsearch', {}) or {},
                sudoku=data.get('sudoku', {}) or {},
                soletra=data.get('soletra', {}) or {},
                output=data.get('output', {}) or {},
            )
        except TypeError as e:
            # Unknown keys in one of the sub-sections
            raise ConfigValidationError(f"Invalid configuration section: {e}")

        return config

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> 'GeneratorConfig':
        """
        Create configuration from command-line arguments.

        Args:
            args: Parsed command-line arguments

        Returns:
            GeneratorConfig instance
        """
        config = cls()

        # Map CLI arguments to config
        if getattr(args, 'game', None):
            config.game_type = args.game
        if getattr(args, 'difficulty', None):
            config.difficulty = args.difficulty
        if getattr(args, 'title', None):
            config.title = args.title
        if getattr(args, 'theme', None):
            config.theme = args.theme
        if getattr(args, 'words', None):
            config.words = [w.strip() for w in args.words.split(',') if w.strip()]
        if getattr(args, 'letters', None):
            config.letters = [normalize_word(l) for l in args.letters if normalize_word(l)]
        if getattr(args, 'center', None):
            config.center_letter = normalize_word(args.center)
        if getattr(args, 'dictionary', None):
            config.dictionary_path = args.dictionary
        if getattr(args, 'seed', None) is not None:
            config.seed = args.seed
        if getattr(args, 'width', None):
            config.width = args.width
        if getattr(args, 'height', None):
            config.height = args.height
        if getattr(args, 'format', None):
            config.output.format = args.format
        if getattr(args, 'log_dir', None):
            config.output.log_directory = args.log_dir
        if getattr(args, 'verbose', False):
            config.output.log_level = "DEBUG"

        return config

    @classmethod
    def merge(
        cls,
        yaml_config: 'GeneratorConfig',
        cli_config: 'GeneratorConfig'
    ) -> 'GeneratorConfig':
        """
        Merge configurations with CLI taking precedence over YAML.

        Args:
            yaml_config: Configuration loaded from YAML file
            cli_config: Configuration from command-line arguments

        Returns:
            Merged GeneratorConfig instance
        """
        merged = GeneratorConfig(
            game_type=yaml_config.game_type,
            difficulty=yaml_config.difficulty,
            title=yaml_config.title,
            description=yaml_config.description,
            theme=yaml_config.theme,
            words=list(yaml_config.words),
            letters=list(yaml_config.letters),
            center_letter=yaml_config.center_letter,
            dictionary_path=yaml_config.dictionary_path,
            seed=yaml_config.seed,
            width=yaml_config.width,
            height=yaml_config.height,
            horizontal_words=yaml_config.horizontal_words,
            vertical_words=yaml_config.vertical_words,
            crossword=yaml_config.crossword,
            wordsearch=yaml_config.wordsearch,
            sudoku=yaml_config.sudoku,
            soletra=yaml_config.soletra,
            output=yaml_config.output,
        )

        # Override with CLI values (non-default values)
        default = cls()

        for name in ('game_type', 'difficulty', 'title', 'description',
                     'theme', 'dictionary_path'):
            value = getattr(cli_config, name)
            if value != getattr(default, name):
                setattr(merged, name, value)
        for name in ('words', 'letters', 'center_letter', 'width', 'height',
                     'horizontal_words', 'vertical_words'):
            value = getattr(cli_config, name)
            if value:
                setattr(merged, name, value)
        if cli_config.seed is not None:
            merged.seed = cli_config.seed
        if cli_config.output.format != default.output.format:
            merged.output.format = cli_config.output.format
        if cli_config.output.log_directory:
            merged.output.log_directory = cli_config.output.log_directory
        if cli_config.output.log_level != default.output.log_level:
            merged.output.log_level = cli_config.output.log_level

        return merged

    def validate(self) -> List[str]:
        """
        Validate configuration values.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if self.game_type not in VALID_GAME_TYPES:
            errors.append(
                f"Invalid game type '{self.game_type}'. "
                f"Must be one of: {VALID_GAME_TYPES}"
            )

        if self.difficulty not in VALID_DIFFICULTIES:
            errors.append(
                f"Invalid difficulty '{self.difficulty}'. "
                f"Must be one of: {VALID_DIFFICULTIES}"
            )

        for name in ('width', 'height', 'horizontal_words', 'vertical_words'):
            value = getattr(self, name)
            if value is not None and value <= 0:
                errors.append(f"{name} must be positive")

        # Crossword caps
        if self.crossword.max_attempts < 1:
            errors.append("crossword.max_attempts must be at least 1")
        if self.crossword.max_passes < 0:
            errors.append("crossword.max_passes must be non-negative")
        if not 0.0 <= self.crossword.early_stop_density <= 1.0:
            errors.append("crossword.early_stop_density must be between 0.0 and 1.0")
        if not 0.0 <= self.crossword.early_stop_word_ratio <= 1.0:
            errors.append("crossword.early_stop_word_ratio must be between 0.0 and 1.0")

        if self.wordsearch.max_placement_attempts < 1:
            errors.append("wordsearch.max_placement_attempts must be at least 1")
        if len(self.wordsearch.answer_filler) != 1:
            errors.append("wordsearch.answer_filler must be a single character")

        if self.sudoku.max_failed_removals < 0:
            errors.append("sudoku.max_failed_removals must be non-negative")
        if self.sudoku.solution_limit < 2:
            errors.append("sudoku.solution_limit must be at least 2")

        # Soletra letters (only when given explicitly)
        if self.letters:
            if len(self.letters) != 7 or len(set(self.letters)) != 7:
                errors.append("Soletra letters must be exactly 7 distinct letters")
            if any(len(l) != 1 for l in self.letters):
                errors.append("Soletra letters must be single A-Z letters")
            if not self.center_letter:
                errors.append("center_letter is required when letters are given")
            elif self.center_letter not in self.letters:
                errors.append(
                    f"center_letter '{self.center_letter}' must be one of the letters"
                )
        if len(self.soletra.fallback_letters) != 7:
            errors.append("soletra.fallback_letters must contain 7 letters")
        elif self.soletra.fallback_center not in self.soletra.fallback_letters:
            errors.append("soletra.fallback_center must be one of fallback_letters")

        if self.output.format not in VALID_OUTPUT_FORMATS:
            errors.append(
                f"Invalid output format '{self.output.format}'. "
                f"Must be one of: {VALID_OUTPUT_FORMATS}"
            )
        if self.output.log_level.upper() not in VALID_LOG_LEVELS:
            errors.append(f"Invalid log level '{self.output.log_level}'")

        return errors

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            'puzzle': {
                'game_type': self.game_type,
                'difficulty': self.difficulty,
                'title': self.title,
                'description': self.description,
                'theme': self.theme,
                'words': list(self.words),
                'letters': list(self.letters),
                'center_letter': self.center_letter,
                'dictionary_path': self.dictionary_path,
                'seed': self.seed,
            },
            'grid': {
                'width': self.width,
                'height': self.height,
                'horizontal_words': self.horizontal_words,
                'vertical_words': self.vertical_words,
            },
            'crossword': asdict(self.crossword),
            'wordsearch': asdict(self.wordsearch),
            'sudoku': asdict(self.sudoku),
            'soletra': asdict(self.soletra),
            'output': asdict(self.output),
        }


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create command-line argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Generate crossword, word-search, Sudoku and Soletra puzzles",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Word search from a word list
  puzzle-generator --game wordsearch --words GATO,CASA,SOL

  # Sudoku as JSON
  puzzle-generator --game sudoku --difficulty hard --format json

  # Soletra with fixed letters
  puzzle-generator --game soletra --letters AERSTOI --center A

  # YAML configuration, CLI arguments override it
  puzzle-generator --config puzzle.yaml --difficulty easy
"""
    )

    # Configuration file
    parser.add_argument(
        "--config", "-c",
        metavar="PATH",
        help="YAML configuration file"
    )

    # Puzzle settings
    parser.add_argument(
        "--game", "-g",
        choices=VALID_GAME_TYPES,
        help="Game type (default: crossword)"
    )
    parser.add_argument(
        "--difficulty", "-d",
        choices=VALID_DIFFICULTIES,
        help="Difficulty level (default: medium)"
    )
    parser.add_argument(
        "--title", "-t",
        metavar="TEXT",
        help="Puzzle title"
    )
    parser.add_argument(
        "--theme",
        metavar="TEXT",
        help="Theme text (Soletra derives letters from it when no letters are given)"
    )
    parser.add_argument(
        "--words", "-w",
        metavar="WORDS",
        help="Comma-separated candidate words"
    )
    parser.add_argument(
        "--words-file",
        metavar="PATH",
        help="Word file: YAML list, or one WORD or WORD;clue per line"
    )
    parser.add_argument(
        "--width",
        type=int,
        metavar="INT",
        help="Grid width override"
    )
    parser.add_argument(
        "--height",
        type=int,
        metavar="INT",
        help="Grid height override"
    )

    # Soletra settings
    parser.add_argument(
        "--letters",
        metavar="LETTERS",
        help="Soletra letters, e.g. AERSTOI"
    )
    parser.add_argument(
        "--center",
        metavar="LETTER",
        help="Soletra center letter"
    )
    parser.add_argument(
        "--dictionary",
        metavar="PATH",
        help="Newline-delimited dictionary for Soletra"
    )

    # Other options
    parser.add_argument(
        "--seed",
        type=int,
        metavar="INT",
        help="Random seed for reproducible output"
    )
    parser.add_argument(
        "--format", "-f",
        choices=VALID_OUTPUT_FORMATS,
        help="Output format (default: yaml)"
    )
    parser.add_argument(
        "--log-dir",
        metavar="PATH",
        help="Also write a rotating log file to this directory"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate config without generating"
    )

    return parser


def load_config(args: Optional[argparse.Namespace] = None) -> GeneratorConfig:
    """
    Load configuration from command-line and/or YAML file.

    Args:
        args: Parsed command-line arguments (if None, parses sys.argv)

    Returns:
        Fully resolved GeneratorConfig

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    if args is None:
        parser = create_argument_parser()
        args = parser.parse_args()

    # Load from YAML if specified
    yaml_config = None
    if getattr(args, 'config', None):
        yaml_config = GeneratorConfig.from_yaml(args.config)

    # Load from CLI
    cli_config = GeneratorConfig.from_args(args)

    # Merge configurations
    if yaml_config:
        config = GeneratorConfig.merge(yaml_config, cli_config)
        # An explicit --format wins even when it names the default
        if getattr(args, 'format', None):
            config.output.format = args.format
    else:
        config = cli_config

    # Validate
    errors = config.validate()
    if errors:
        raise ConfigValidationError(
            "Configuration validation failed:\n" +
            "\n".join(f"  - {e}" for e in errors)
        )

    return config

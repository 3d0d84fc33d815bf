# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Soletra (Spelling Bee) generator.

Given seven letters and a center letter, finds every dictionary word that
uses only those letters and contains the center, marks pangrams, trims the
list to the difficulty's size and computes the score thresholds.

Letters can also be derived from theme words: the most frequent letters of
the theme are combined until a set with a good word count is found.
"""

import logging
import random
from collections import Counter
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from config import SoletraSettings, get_word_limits
from dictionary_index import DictionaryIndex
from models import (
    Difficulty, PuzzleInputError, SoletraPuzzle, SoletraRankings, WordLimits,
    normalize_word,
)
from word_selector import is_pangram, select_best_words


logger = logging.getLogger(__name__)

LETTER_COUNT = 7
PANGRAM_BONUS = 7

# Fractions of the maximum score for each ranking level
RANKING_FRACTIONS = (
    ('beginner', 0.02),
    ('good', 0.05),
    ('great', 0.10),
    ('amazing', 0.25),
    ('genius', 0.70),
)

# Letter derivation scoring
IN_RANGE_BONUS = 500
ABOVE_MAX_BONUS = 100
PANGRAM_COMBINATION_BONUS = 30
POOL_GROWTH_INTERVAL = 30


@dataclass
class WordCheck:
    """Outcome of checking a player's guess."""
    valid: bool
    score: int = 0
    is_pangram: bool = False
    error: Optional[str] = None


@dataclass
class RankingStatus:
    """Current ranking level and distance to the next one."""
    level: str
    next_level: Optional[str]
    points_to_next: int


@dataclass
class LetterChoice:
    """A scored letter combination found while deriving letters."""
    letters: List[str]
    center_letter: str
    words: List[str]
    pangrams: List[str]
    score: float


def word_score(word: str, letters: Sequence[str]) -> int:
    """1 point for 4 letters, else one per letter; +7 for a pangram."""
    normalized = normalize_word(word)
    score = 1 if len(normalized) == 4 else len(normalized)
    if is_pangram(normalized, letters):
        score += PANGRAM_BONUS
    return score


def calculate_rankings(max_score: int) -> SoletraRankings:
    """Threshold per level, floored to an integer."""
    values = {name: int(max_score * fraction) for name, fraction in RANKING_FRACTIONS}
    return SoletraRankings(**values)


def theme_letter_frequency(theme_words: Iterable[str]) -> List[str]:
    """
    Distinct theme letters, most frequent first.

    Each letter counts once per word it appears in; ties keep first-seen order.
    """
    frequency: Counter = Counter()
    for word in (normalize_word(t) for t in theme_words):
        frequency.update(list(dict.fromkeys(word)))
    return [letter for letter, _ in frequency.most_common()]


def find_pangrams(words: Iterable[str], letters: Sequence[str]) -> List[str]:
    return [w for w in words if is_pangram(w, letters)]


def normalize_letters(letters: Sequence[str], center_letter: str) -> Tuple[List[str], str]:
    """
    Normalize a letter set and center letter.

    Raises:
        PuzzleInputError: Unless there are exactly 7 distinct A-Z letters
                          and the center is one of them
    """
    normalized = [normalize_word(l) for l in letters]
    center = normalize_word(center_letter or '')

    if len(normalized) != LETTER_COUNT or any(len(l) != 1 for l in normalized):
        raise PuzzleInputError(
            f"Soletra needs exactly {LETTER_COUNT} single letters, got {list(letters)}"
        )
    if len(set(normalized)) != LETTER_COUNT:
        raise PuzzleInputError(f"Soletra letters must be distinct, got {normalized}")
    if center not in normalized:
        raise PuzzleInputError(
            f"Center letter '{center_letter}' must be one of {normalized}"
        )
    return normalized, center


def check_word(puzzle: SoletraPuzzle, word: str, min_length: int = 4) -> WordCheck:
    """Check a guess against a puzzle, reporting why it is rejected."""
    normalized = normalize_word(word)

    if len(normalized) < min_length:
        return WordCheck(valid=False, error="too short")
    if puzzle.center_letter not in normalized:
        return WordCheck(valid=False, error="missing center letter")
    available = set(puzzle.letters)
    if any(ch not in available for ch in normalized):
        return WordCheck(valid=False, error="uses unavailable letters")
    if normalized not in puzzle.valid_words:
        return WordCheck(valid=False, error="not in word list")

    return WordCheck(
        valid=True,
        score=word_score(normalized, puzzle.letters),
        is_pangram=is_pangram(normalized, puzzle.letters),
    )


def get_ranking(puzzle: SoletraPuzzle, current_score: int) -> RankingStatus:
    """Highest level reached by ``current_score`` and points to the next."""
    rankings = puzzle.rankings.to_dict()
    levels = [(name, rankings[name]) for name, _ in RANKING_FRACTIONS]
    levels.append(('queen_bee', puzzle.max_score))

    status = RankingStatus(
        level=levels[0][0],
        next_level=levels[1][0],
        points_to_next=levels[0][1] - current_score,
    )
    for i, (name, threshold) in enumerate(levels):
        if current_score >= threshold:
            if i + 1 < len(levels):
                next_name, next_threshold = levels[i + 1]
                status = RankingStatus(name, next_name, next_threshold - current_score)
            else:
                status = RankingStatus(name, None, 0)
    return status


class SoletraGenerator:
    """
    Builds Soletra puzzles against a dictionary index.

    Usage:
        generator = SoletraGenerator(index, rng=random.Random(5))
        puzzle = generator.build_puzzle(list("AERSTOI"), "A", "medium")
    """

    def __init__(
        self,
        index: DictionaryIndex,
        settings: Optional[SoletraSettings] = None,
        rng: Optional[random.Random] = None,
    ):
        self.index = index
        self.settings = settings or SoletraSettings()
        self.rng = rng or random.Random()
        self._query_cache: Dict[Tuple[FrozenSet[str], str], List[str]] = {}

    def find_words(self, letters: Sequence[str], center: str) -> List[str]:
        """Dictionary words for a letter set, memoized per generator."""
        key = (frozenset(letters), center)
        if key not in self._query_cache:
            self._query_cache[key] = self.index.find_by_subset_and_required(
                letters, center, min_length=self.settings.min_word_length
            )
        return self._query_cache[key]

    def build_puzzle(
        self,
        letters: Sequence[str],
        center_letter: str,
        difficulty=Difficulty.MEDIUM,
        title: str = "Soletra",
        theme_words: Optional[Iterable[str]] = None,
        limits: Optional[WordLimits] = None,
    ) -> SoletraPuzzle:
        """
        Build a puzzle for a fixed letter set.

        Falls back to the common-letter set when the given letters yield
        fewer words than the difficulty minimum.

        Raises:
            PuzzleInputError: If the letters or center are malformed
        """
        difficulty = Difficulty.parse(difficulty)
        limits = limits or get_word_limits(difficulty.value)
        letters, center = normalize_letters(letters, center_letter)
        themes = {normalize_word(w) for w in (theme_words or ())}
        themes.discard('')

        words = self.find_words(letters, center)
        logger.info(
            f"Soletra {''.join(letters)} (center {center}): {len(words)} words "
            f"(limits {limits.min}-{limits.max})"
        )

        if len(words) < limits.min:
            fallback_letters, fallback_center = normalize_letters(
                self.settings.fallback_letters, self.settings.fallback_center
            )
            if set(fallback_letters) != set(letters) or fallback_center != center:
                fallback_words = self.find_words(fallback_letters, fallback_center)
                if len(fallback_words) > len(words):
                    logger.warning(
                        f"Only {len(words)} words for {''.join(letters)}; using "
                        f"fallback letters {''.join(fallback_letters)} "
                        f"({len(fallback_words)} words)"
                    )
                    letters, center, words = fallback_letters, fallback_center, fallback_words
            if len(words) < limits.min:
                logger.warning(
                    f"Soletra has {len(words)} words, below the minimum of {limits.min}"
                )

        return self._assemble(letters, center, words, difficulty, title, themes, limits)

    def _assemble(
        self,
        letters: List[str],
        center: str,
        words: List[str],
        difficulty: Difficulty,
        title: str,
        themes: set,
        limits: WordLimits,
    ) -> SoletraPuzzle:
        final_words = list(words)
        if len(final_words) > limits.max:
            logger.info(f"Limiting {len(final_words)} words to {limits.max}")
            selected = select_best_words(
                final_words, limits.max, letters, theme_words=themes, rng=self.rng
            )
            chosen = set(selected)
            for word in final_words:
                if word in chosen:
                    continue
                if word in themes or is_pangram(word, letters):
                    selected.append(word)
                    chosen.add(word)
            final_words = selected

        final_words = sorted(set(final_words))
        pangrams = find_pangrams(final_words, letters)
        max_score = sum(word_score(w, letters) for w in final_words)

        others = [l for l in letters if l != center]
        self.rng.shuffle(others)

        included_themes = sum(1 for w in final_words if w in themes)
        logger.info(
            f"Soletra result: {len(final_words)} words, {len(pangrams)} pangrams, "
            f"max score {max_score}"
            + (f", {included_themes}/{len(themes)} theme words" if themes else "")
        )

        return SoletraPuzzle(
            title=title,
            difficulty=difficulty,
            letters=[center] + others,
            center_letter=center,
            valid_words=final_words,
            pangrams=pangrams,
            max_score=max_score,
            rankings=calculate_rankings(max_score),
        )

    def derive_letters(
        self,
        theme_words: Iterable[str],
        limits: WordLimits,
    ) -> LetterChoice:
        """
        Pick seven letters and a center from the theme's letter frequency.

        Each attempt draws seven letters from the most frequent ones (the
        pool widens by one letter every 30 attempts) and tries each as the
        center. Only combinations reaching ``limits.min`` words count.

        Raises:
            PuzzleInputError: With fewer than 7 distinct theme letters, or
                              when no combination reaches the minimum
        """
        sorted_letters = theme_letter_frequency(theme_words)

        if len(sorted_letters) < LETTER_COUNT:
            raise PuzzleInputError(
                f"Theme has only {len(sorted_letters)} distinct letters, "
                f"need at least {LETTER_COUNT}"
            )

        logger.debug(f"Theme letters by frequency: {''.join(sorted_letters[:15])}")

        best: Optional[LetterChoice] = None
        attempts = self.settings.max_letter_attempts

        for attempt in range(attempts):
            pool_size = min(LETTER_COUNT + attempt // POOL_GROWTH_INTERVAL, len(sorted_letters))
            pool = sorted_letters[:pool_size]
            selected = self.rng.sample(pool, LETTER_COUNT)

            ideal = False
            for center in selected:
                words = self.find_words(selected, center)
                total = len(words)
                pangrams = find_pangrams(words, selected)
                in_range = limits.min <= total <= limits.max

                score = 0.0
                if in_range:
                    score += IN_RANGE_BONUS
                elif total > limits.max:
                    score += ABOVE_MAX_BONUS
                score -= abs(total - limits.target)
                score += len(pangrams) * PANGRAM_COMBINATION_BONUS

                if total >= limits.min and (best is None or score > best.score):
                    best = LetterChoice(list(selected), center, words, pangrams, score)
                    if in_range and pangrams:
                        logger.debug(f"Ideal combination on attempt {attempt + 1}: {total} words")
                        ideal = True
                        break

            if ideal:
                break

        if best is None:
            raise PuzzleInputError(
                f"No letter combination from the theme reaches {limits.min} words"
            )

        logger.info(
            f"Derived letters {''.join(best.letters)} (center {best.center_letter}): "
            f"{len(best.words)} words, {len(best.pangrams)} pangrams"
        )
        return best

    def generate_from_theme(
        self,
        theme_words: Sequence[str],
        difficulty=Difficulty.MEDIUM,
        title: str = "Soletra",
    ) -> SoletraPuzzle:
        """Derive letters from the theme and build a puzzle favouring theme words."""
        difficulty = Difficulty.parse(difficulty)
        limits = get_word_limits(difficulty.value)
        choice = self.derive_letters(theme_words, limits)
        themes = {normalize_word(w) for w in theme_words}
        themes.discard('')
        return self._assemble(
            choice.letters, choice.center_letter, choice.words,
            difficulty, title, themes, limits,
        )


def build_puzzle(
    letters: Sequence[str],
    center_letter: str,
    index: DictionaryIndex,
    difficulty=Difficulty.MEDIUM,
    title: str = "Soletra",
    theme_words: Optional[Iterable[str]] = None,
    settings: Optional[SoletraSettings] = None,
    rng: Optional[random.Random] = None,
) -> SoletraPuzzle:
    """Convenience wrapper around SoletraGenerator.build_puzzle."""
    generator = SoletraGenerator(index, settings=settings, rng=rng)
    return generator.build_puzzle(
        letters, center_letter, difficulty=difficulty, title=title,
        theme_words=theme_words,
    )


def generate_from_theme(
    theme_words: Sequence[str],
    index: DictionaryIndex,
    difficulty=Difficulty.MEDIUM,
    title: str = "Soletra",
    settings: Optional[SoletraSettings] = None,
    rng: Optional[random.Random] = None,
) -> SoletraPuzzle:
    """Convenience wrapper around SoletraGenerator.generate_from_theme."""
    generator = SoletraGenerator(index, settings=settings, rng=rng)
    return generator.generate_from_theme(theme_words, difficulty=difficulty, title=title)

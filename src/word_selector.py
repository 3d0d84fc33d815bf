# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Word scoring and selection.

Down-samples a candidate list to a target size while keeping priority
words (theme matches, pangrams, common words) and a spread of word
lengths. Selection runs in two phases: a per-length floor, then a global
fill by score.
"""

import logging
import random
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from models import normalize_word


THEME_BONUS = 500
PANGRAM_BONUS = 200
COMMON_BONUS = 50
HIGH_SCORE_THRESHOLD = 100
JITTER = 30

# Length buckets that get a guaranteed share of the selection
BUCKET_MIN_LENGTH = 4
BUCKET_MAX_LENGTH = 12

# Common Portuguese words, favoured during selection
COMMON_WORDS = frozenset([
    'CASA', 'AGUA', 'AMOR', 'VIDA', 'TEMPO', 'TERRA', 'MUNDO', 'LADO', 'HORA', 'COISA',
    'MODO', 'PARTE', 'LUGAR', 'NOME', 'CASO', 'PONTO', 'FORMA', 'MEIO', 'OBRA', 'FATO',
    'TIPO', 'LINHA', 'FACE', 'AREA', 'BASE', 'FORA', 'ISSO', 'ESSE', 'AQUI', 'ONDE',
    'COMO', 'MAIS', 'CADA', 'OUTRO', 'MESMO', 'NOVO', 'PRIMEIRO', 'ULTIMO', 'GRANDE',
    'BELO', 'ALTO', 'BAIXO', 'LONGO', 'LARGO', 'FORTE', 'LIVRE', 'CERTO', 'CLARO',
    'FAZER', 'PODER', 'SABER', 'QUERER', 'DIZER', 'ESTAR', 'FICAR', 'TOMAR', 'LEVAR',
    'PEDIR', 'CRIAR', 'ABRIR', 'FALAR', 'OLHAR', 'COMER', 'BEBER', 'ANDAR', 'CORRER',
    'SALA', 'MESA', 'PORTA', 'JANELA', 'CAMA', 'CADEIRA', 'LIVRO', 'PAPEL', 'CAIXA',
])

logger = logging.getLogger(__name__)


def is_pangram(word: str, letters: Iterable[str]) -> bool:
    """True if ``word`` uses every letter in ``letters`` at least once."""
    word_letters = set(normalize_word(word))
    return all(normalize_word(letter) in word_letters for letter in letters)


def length_bonus(word: str) -> int:
    """5-8 letters is the sweet spot; 4 letters scores lowest."""
    length = len(word)
    if 5 <= length <= 8:
        return 10
    if length == 4:
        return 2
    return 5


def score_word(
    word: str,
    letters: Sequence[str],
    theme_words: Set[str],
    rng: random.Random,
    common_words: Set[str] = COMMON_WORDS,
) -> float:
    """Priority score with a random jitter so repeated calls vary."""
    score = 0.0
    if word in theme_words:
        score += THEME_BONUS
    if is_pangram(word, letters):
        score += PANGRAM_BONUS
    if word in common_words:
        score += COMMON_BONUS
    score += length_bonus(word)
    score += rng.random() * JITTER
    return score


def select_best_words(
    candidates: Sequence[str],
    target_count: int,
    letters: Sequence[str],
    theme_words: Optional[Iterable[str]] = None,
    rng: Optional[random.Random] = None,
) -> List[str]:
    """
    Select ``min(target_count, len(candidates))`` words.

    Priority: theme words > pangrams > common words > length diversity.

    Args:
        candidates: Normalized candidate words
        target_count: Number of words wanted
        letters: The active letter set (for pangram detection)
        theme_words: Words to favour heavily
        rng: Random source (a fresh one when omitted)

    Returns:
        Selected words; all candidates when they already fit
    """
    if target_count <= 0:
        return []
    if len(candidates) <= target_count:
        return list(candidates)

    rng = rng or random.Random()
    themes = {normalize_word(w) for w in (theme_words or ())}

    scored: List[Tuple[str, float]] = [
        (word, score_word(word, letters, themes, rng)) for word in candidates
    ]
    scored.sort(key=lambda item: item[1], reverse=True)

    # Group by length, high scorers first, the rest shuffled for variety
    by_length: Dict[int, List[Tuple[str, float]]] = {}
    for item in scored:
        by_length.setdefault(len(item[0]), []).append(item)
    for length, items in by_length.items():
        high = [item for item in items if item[1] > HIGH_SCORE_THRESHOLD]
        normal = [item for item in items if item[1] <= HIGH_SCORE_THRESHOLD]
        rng.shuffle(normal)
        by_length[length] = high + normal

    # Phase 1: guarantee a few words of each length
    min_per_length = max(2, target_count // 10)
    selected: List[str] = []
    for length in range(BUCKET_MIN_LENGTH, BUCKET_MAX_LENGTH + 1):
        bucket = by_length.get(length, [])
        selected.extend(word for word, _ in bucket[:min_per_length])

    # Phase 2: fill from the global ranking
    chosen = set(selected)
    for word, _ in scored:
        if len(selected) >= target_count:
            break
        if word not in chosen:
            selected.append(word)
            chosen.add(word)

    logger.debug(
        f"Selected {min(len(selected), target_count)} of {len(candidates)} words "
        f"({len(themes)} theme words, floor {min_per_length} per length)"
    )
    return selected[:target_count]

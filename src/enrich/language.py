"""Guess the language of a book's vocabulary terms.

The guess is a heuristic: French is assumed when at least 30% of the
sampled terms (three characters or longer) contain a French diacritic.
Lists longer than the sample size are randomly sampled, so the result for
those is probabilistic unless a seeded random generator is passed in.
"""

import random
import re
from collections.abc import Sequence

from common.constants import FRENCH_ACCENT_RATIO, FRENCH_ACCENTS, LANGUAGE_SAMPLE_SIZE
from common.logger import get_logger

logger = get_logger(__name__)

FRENCH_ENDINGS = re.compile(r"(eur|euse|eux|oise|ois|aire|elle|ique|able|ible)$")


def sample_terms(
    terms: Sequence[str],
    sample_size: int = LANGUAGE_SAMPLE_SIZE,
    rng: random.Random | None = None,
) -> list[str]:
    """Return all terms, or a uniform random sample when there are more than sample_size."""
    if len(terms) <= sample_size:
        return list(terms)
    return (rng or random).sample(list(terms), sample_size)


def detect_language(
    terms: Sequence[str],
    rng: random.Random | None = None,
    sample_size: int = LANGUAGE_SAMPLE_SIZE,
) -> str:
    """Detect whether vocabulary terms are French or English.

    Args:
        terms: Vocabulary highlight texts of one book
        rng: Random generator used for sampling (module random if None)
        sample_size: Maximum number of terms inspected

    Returns:
        "fr" or "en" ("en" when no term is long enough to judge)
    """
    with_accents = 0
    qualifying = 0
    ending_score = 0

    for term in sample_terms(terms, sample_size, rng):
        word = term.lower().strip()
        if len(word) < 3:
            continue

        qualifying += 1
        if any(char in FRENCH_ACCENTS for char in word):
            with_accents += 1
        if len(word) > 4 and FRENCH_ENDINGS.search(word):
            ending_score += 1

    if qualifying == 0:
        return "en"

    ratio = with_accents / qualifying
    logger.debug(
        f"Language detection: {with_accents}/{qualifying} terms with accents "
        f"({ratio:.1%}), French endings: {ending_score}"
    )

    return "fr" if ratio >= FRENCH_ACCENT_RATIO else "en"

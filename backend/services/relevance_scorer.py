"""
Keyword-overlap relevance scoring.

Scores are term counts normalised by the square root of the chunk length so a
long chunk does not win purely by volume.
"""
import math
import string
from typing import List

STOP_WORDS = frozenset({
    "the", "and", "for", "are", "but", "not", "you", "all", "can", "had",
    "her", "was", "one", "our", "out", "has", "how", "who", "what", "when",
    "where", "which", "why", "this", "that", "with", "from", "have", "will",
    "does", "about",
})

MIN_TERM_LENGTH = 3


def question_terms(question: str) -> List[str]:
    """
    Extract the search terms of a question.

    Tokens are lower-cased, split on whitespace and stripped of surrounding
    punctuation; short tokens and stop words are dropped. Repeated terms are
    kept, so they count once per repetition.
    """
    terms = []
    for token in question.lower().split():
        token = token.strip(string.punctuation)
        if len(token) < MIN_TERM_LENGTH or token in STOP_WORDS:
            continue
        terms.append(token)
    return terms


def score_chunk(chunk_text: str, question: str) -> float:
    """
    Score how well a chunk matches a question.

    Args:
        chunk_text: Chunk text
        question: User question

    Returns:
        Non-negative score; 0.0 when nothing matches or the question has no
        usable terms
    """
    terms = question_terms(question)
    if not terms:
        return 0.0

    chunk_lower = chunk_text.lower()
    # Substring matches: "like" also counts inside "likes"
    occurrences = sum(chunk_lower.count(term) for term in terms)
    if occurrences == 0:
        return 0.0

    word_count = max(len(chunk_text.split()), 1)
    return occurrences / math.sqrt(word_count)

"""Unit tests for keyword relevance scoring."""
import math
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import pytest
from services.relevance_scorer import score_chunk, question_terms, STOP_WORDS


CAT_TEXT = "The cat sat on the mat. The cat likes fish."


class TestQuestionTerms:

    def test_stop_words_and_short_tokens_are_dropped(self):
        assert question_terms("What does the cat like?") == ["cat", "like"]

    def test_punctuation_is_stripped(self):
        assert question_terms('"Revenue," (growth)!') == ["revenue", "growth"]

    def test_lower_cases_terms(self):
        assert question_terms("INVOICE Totals") == ["invoice", "totals"]

    def test_only_stop_words(self):
        assert question_terms("what is the why of this") == []

    def test_stop_word_list_is_closed(self):
        assert len(STOP_WORDS) == 31
        assert "about" in STOP_WORDS
        assert "is" not in STOP_WORDS  # too short to matter anyway


class TestScoreChunk:

    def test_worked_example(self):
        # "cat" twice, "like" once inside "likes"; 10 words in the chunk
        score = score_chunk(CAT_TEXT, "What does the cat like?")

        assert score == pytest.approx(3 / math.sqrt(10))

    def test_no_usable_terms_scores_zero(self):
        assert score_chunk(CAT_TEXT, "is it on?") == 0.0
        assert score_chunk(CAT_TEXT, "what about that") == 0.0
        assert score_chunk(CAT_TEXT, "") == 0.0

    def test_no_overlap_scores_zero(self):
        assert score_chunk(CAT_TEXT, "quarterly revenue") == 0.0

    def test_substring_matches_count(self):
        assert score_chunk("category catalogue", "cat") == pytest.approx(2 / math.sqrt(2))

    def test_case_insensitive(self):
        assert score_chunk("PYTHON Python python", "python") == pytest.approx(3 / math.sqrt(3))

    def test_repeated_question_terms_count_each_time(self):
        single = score_chunk("budget plan", "budget")
        double = score_chunk("budget plan", "budget budget")

        assert double == pytest.approx(2 * single)

    def test_padding_divides_by_square_root_of_length(self):
        base = "budget review meeting notes"
        padded = base + " filler words only here"

        ratio = score_chunk(padded, "budget") / score_chunk(base, "budget")

        assert ratio == pytest.approx(1 / math.sqrt(2))

    def test_duplicated_text_is_not_proportional_to_raw_count(self):
        text = "budget review meeting notes"
        original = score_chunk(text, "budget review")
        duplicated = score_chunk(f"{text} {text}", "budget review")

        assert duplicated == pytest.approx(original * math.sqrt(2))
        assert duplicated != pytest.approx(original * 2)

    def test_score_is_never_negative(self):
        for question in ["cat", "the", "fish mat", "zzz", "?!"]:
            assert score_chunk(CAT_TEXT, question) >= 0

    def test_blank_chunk_does_not_divide_by_zero(self):
        assert score_chunk("", "budget") == 0.0

    def test_deterministic(self):
        assert score_chunk(CAT_TEXT, "cat fish") == score_chunk(CAT_TEXT, "cat fish")

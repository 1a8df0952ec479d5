"""Unit tests for RetrievalEngine."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import pytest
from services.retrieval_engine import RetrievalEngine, make_preview
from services.chunking_engine import ChunkingEngine
from models.document import Document
from models.question import InvalidQuestionError


def make_document(doc_id: int, content: str, filename: str = None) -> Document:
    return Document(
        id=doc_id,
        filename=filename or f"doc{doc_id}.txt",
        content=content,
        file_size=len(content),
        user_id=1
    )


# Four-word chunks with no overlap; "apple" appears 1, 2, 3 and 0 times
ORCHARD = (
    "apple pear pear pear "
    "apple apple plum plum "
    "apple apple apple kiwi "
    "fig fig fig fig"
)


class TestRetrievalEngine:
    """Test suite for RetrievalEngine class."""

    @pytest.fixture
    def small_engine(self):
        return RetrievalEngine(ChunkingEngine(chunk_size=4, chunk_overlap=0))

    def test_default_chunking(self):
        engine = RetrievalEngine()
        assert engine.chunking_engine.chunk_size == 500
        assert engine.chunking_engine.chunk_overlap == 100

    def test_matching_document_ranks_above_non_matching(self):
        engine = RetrievalEngine()
        cats = make_document(1, "The cat sat on the mat. The cat likes fish.", "cats.txt")
        other = make_document(2, "Quarterly revenue grew in every region.", "report.txt")

        result = engine.retrieve([other, cats], "What does the cat like?")

        assert [sc.chunk.document_name for sc in result.chunks] == ["cats.txt", "report.txt"]
        assert result.chunks[0].relevance_score > result.chunks[1].relevance_score == 0

    def test_single_document_context_is_in_reading_order(self, small_engine):
        result = small_engine.retrieve([make_document(1, ORCHARD)], "apple", top_k=2)

        # Chunks 2 and 1 score best; a single document reads top to bottom
        assert [sc.chunk.index for sc in result.chunks] == [1, 2]
        assert result.context.index("apple apple plum plum") < result.context.index(
            "apple apple apple kiwi"
        )

    def test_multi_document_context_is_in_score_order(self, small_engine):
        documents = [
            make_document(1, ORCHARD, "orchard.txt"),
            make_document(2, "apple kiwi kiwi kiwi", "basket.txt"),
        ]

        result = small_engine.retrieve(documents, "apple", top_k=4)

        assert [(sc.chunk.document_id, sc.chunk.index) for sc in result.chunks] == [
            (1, 2), (1, 1), (1, 0), (2, 0)
        ]
        scores = [sc.relevance_score for sc in result.chunks]
        assert scores == sorted(scores, reverse=True)

    def test_context_labels(self, small_engine):
        documents = [
            make_document(1, ORCHARD, "orchard.txt"),
            make_document(2, "apple kiwi kiwi kiwi", "basket.txt"),
        ]

        result = small_engine.retrieve(documents, "apple", top_k=2)

        assert result.context == (
            '[Section 1 from "orchard.txt"]\napple apple apple kiwi\n\n'
            '[Section 2 from "orchard.txt"]\napple apple plum plum'
        )

    def test_top_k_bound(self, small_engine):
        document = make_document(1, ORCHARD)

        assert len(small_engine.retrieve([document], "apple", top_k=2).chunks) == 2
        assert len(small_engine.retrieve([document], "apple", top_k=50).chunks) == 4

    def test_default_top_k_depends_on_document_count(self, small_engine):
        long_text = " ".join(["apple"] * 80)

        single = small_engine.retrieve([make_document(1, long_text)], "apple")
        multi = small_engine.retrieve(
            [make_document(1, long_text), make_document(2, long_text)], "apple"
        )

        assert len(single.chunks) == 5
        assert len(multi.chunks) == 8

    def test_ties_keep_document_then_chunk_order(self, small_engine):
        documents = [
            make_document(1, "one two three four five six seven eight"),
            make_document(2, "nine ten eleven twelve"),
        ]

        result = small_engine.retrieve(documents, "unrelated question", top_k=3)

        assert all(sc.relevance_score == 0 for sc in result.chunks)
        assert [(sc.chunk.document_id, sc.chunk.index) for sc in result.chunks] == [
            (1, 0), (1, 1), (2, 0)
        ]

    def test_stop_word_question_still_returns_chunks(self, small_engine):
        result = small_engine.retrieve([make_document(1, ORCHARD)], "what is this about?")

        assert len(result.chunks) == 4
        assert all(sc.relevance_score == 0 for sc in result.chunks)

    def test_citations_grouped_by_document(self, small_engine):
        documents = [
            make_document(1, ORCHARD, "orchard.txt"),
            make_document(2, "apple apple apple apple", "basket.txt"),
        ]

        result = small_engine.retrieve(documents, "apple", top_k=3)

        # Selection order: basket#0 (2.0), orchard#2 (1.5), orchard#1 (1.0)
        assert [c.filename for c in result.citations] == ["basket.txt", "orchard.txt"]
        assert [chunk.index for chunk in result.citations[0].chunks] == [1]
        # Inside a document citations are listed by position, not score
        assert [chunk.index for chunk in result.citations[1].chunks] == [2, 3]
        assert result.citations[1].chunks[0].preview == "apple apple plum plum"

    def test_citation_preview_is_truncated(self):
        engine = RetrievalEngine()
        content = "budget " + "x" * 400

        result = engine.retrieve([make_document(1, content)], "budget")

        preview = result.citations[0].chunks[0].preview
        assert len(preview) == 203
        assert preview.endswith("...")
        assert preview.startswith("budget x")

    def test_no_documents_gives_empty_result(self):
        result = RetrievalEngine().retrieve([], "anything useful")

        assert result.is_empty
        assert result.context == ""
        assert result.citations == []

    def test_short_question_is_rejected(self):
        with pytest.raises(InvalidQuestionError):
            RetrievalEngine().retrieve([make_document(1, ORCHARD)], " a b ")

    def test_top_k_must_be_positive(self, small_engine):
        with pytest.raises(ValueError):
            small_engine.retrieve([make_document(1, ORCHARD)], "apple", top_k=0)

    def test_retrieval_is_deterministic(self, small_engine):
        documents = [make_document(1, ORCHARD), make_document(2, "apple kiwi kiwi kiwi")]

        first = small_engine.retrieve(documents, "apple kiwi", top_k=3)
        second = small_engine.retrieve(documents, "apple kiwi", top_k=3)

        assert first == second


class TestMakePreview:

    def test_short_text_unchanged(self):
        assert make_preview("short") == "short"

    def test_exact_length_unchanged(self):
        assert make_preview("x" * 200) == "x" * 200

    def test_long_text_truncated(self):
        assert make_preview("y" * 201) == "y" * 200 + "..."

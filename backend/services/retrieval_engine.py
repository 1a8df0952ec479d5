"""Retrieval engine ranking document chunks by keyword relevance."""
import logging
from typing import Dict, List, Optional

from models.chunk import Citation, CitationChunk, RetrievalResult, ScoredChunk
from models.document import Document
from models.question import validate_question
from services.chunking_engine import ChunkingEngine
from services.relevance_scorer import score_chunk
from config import SINGLE_DOCUMENT_TOP_K, MULTI_DOCUMENT_TOP_K, PREVIEW_LENGTH

logger = logging.getLogger(__name__)


def make_preview(text: str, length: int = PREVIEW_LENGTH) -> str:
    """Cut text to length characters, marking truncation with an ellipsis."""
    if len(text) <= length:
        return text
    return text[:length] + "..."


class RetrievalEngine:
    """Select the chunks of one or more documents that best match a question."""

    def __init__(
        self,
        chunking_engine: Optional[ChunkingEngine] = None,
        preview_length: int = PREVIEW_LENGTH
    ):
        """
        Initialize the retrieval engine.

        Args:
            chunking_engine: Splits documents into chunks (default settings if omitted)
            preview_length: Characters of chunk text kept in citation previews
        """
        self.chunking_engine = chunking_engine or ChunkingEngine()
        self.preview_length = preview_length

    def retrieve(
        self,
        documents: List[Document],
        question: str,
        top_k: Optional[int] = None
    ) -> RetrievalResult:
        """
        Retrieve the top-K chunks across documents for a question.

        Strategy:
        1. Chunk every document independently
        2. Score every chunk against the question
        3. Stable sort by score, descending; ties keep document-then-chunk order
        4. Keep the first top_k chunks
        5. With a single document, put the kept chunks back in reading order;
           with several documents keep them in score order
        6. Group the kept chunks per document for citation display

        Args:
            documents: Documents in scope
            question: User question (at least 3 non-whitespace characters)
            top_k: Chunks to keep; defaults to 5 for one document, 8 for several

        Returns:
            RetrievalResult with prompt-ordered chunks, the formatted context
            and per-document citations. Empty when there are no documents.

        Raises:
            InvalidQuestionError: If the question is too short
            ValueError: If top_k is smaller than 1
        """
        question = validate_question(question)

        if not documents:
            logger.info("No documents in scope, nothing to retrieve")
            return RetrievalResult(chunks=[], context="", citations=[])

        if top_k is None:
            top_k = SINGLE_DOCUMENT_TOP_K if len(documents) == 1 else MULTI_DOCUMENT_TOP_K
        if top_k < 1:
            raise ValueError(f"top_k must be at least 1, got {top_k}")

        chunks = self.chunking_engine.chunk_documents(documents)
        scored_chunks = [
            ScoredChunk(chunk=chunk, relevance_score=score_chunk(chunk.text, question))
            for chunk in chunks
        ]

        # sorted() is stable, which keeps insertion order among equal scores
        ranked = sorted(scored_chunks, key=lambda sc: sc.relevance_score, reverse=True)
        selected = ranked[:top_k]

        if len(documents) == 1:
            selected = sorted(selected, key=lambda sc: sc.chunk.index)

        top_score = ranked[0].relevance_score if ranked else 0.0
        if ranked and top_score == 0:
            logger.info("No chunk shares a term with the question, context is low confidence")

        logger.info(
            f"Selected {len(selected)} of {len(scored_chunks)} chunks "
            f"from {len(documents)} documents (top score: {top_score:.3f})"
        )

        return RetrievalResult(
            chunks=selected,
            context=self.build_context(selected),
            citations=self.build_citations(selected)
        )

    @staticmethod
    def build_context(chunks: List[ScoredChunk]) -> str:
        """
        Concatenate chunks into the prompt context, in the given order.

        Each chunk is labelled with its rank and source filename.
        """
        return "\n\n".join(
            f'[Section {position} from "{sc.chunk.document_name}"]\n{sc.chunk.text}'
            for position, sc in enumerate(chunks, start=1)
        )

    def build_citations(self, chunks: List[ScoredChunk]) -> List[Citation]:
        """
        Group chunks by source document for display.

        Documents appear in the order their first chunk appears; inside a
        document chunks are listed by ascending position. Indices are 1-based.
        """
        grouped: Dict[int, Citation] = {}
        positions: Dict[int, List[ScoredChunk]] = {}

        for sc in chunks:
            document_id = sc.chunk.document_id
            if document_id not in grouped:
                grouped[document_id] = Citation(
                    document_id=document_id,
                    filename=sc.chunk.document_name
                )
                positions[document_id] = []
            positions[document_id].append(sc)

        for document_id, citation in grouped.items():
            for sc in sorted(positions[document_id], key=lambda item: item.chunk.index):
                citation.chunks.append(CitationChunk(
                    index=sc.chunk.index + 1,
                    preview=make_preview(sc.chunk.text, self.preview_length)
                ))

        return list(grouped.values())

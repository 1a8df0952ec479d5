"""Chunking engine producing overlapping word windows."""
import logging
from typing import List

from models.document import Document
from models.chunk import Chunk
from config import CHUNK_SIZE, CHUNK_OVERLAP

logger = logging.getLogger(__name__)


class ChunkingEngine:
    """Segments document text into overlapping, word-counted chunks."""

    def __init__(self, chunk_size: int = CHUNK_SIZE, chunk_overlap: int = CHUNK_OVERLAP):
        """
        Initialize ChunkingEngine.

        Args:
            chunk_size: Target chunk size in whitespace-delimited words
            chunk_overlap: Words shared between consecutive chunks

        Raises:
            ValueError: If the window would not advance (overlap >= size)
        """
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        if chunk_overlap < 0:
            raise ValueError(f"chunk_overlap cannot be negative, got {chunk_overlap}")
        if chunk_overlap >= chunk_size:
            raise ValueError(
                f"chunk_overlap ({chunk_overlap}) must be smaller than chunk_size ({chunk_size})"
            )

        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap

    @property
    def step(self) -> int:
        return self.chunk_size - self.chunk_overlap

    def chunk_documents(self, documents: List[Document]) -> List[Chunk]:
        """
        Chunk every document independently.

        Args:
            documents: Documents to split

        Returns:
            Chunks of all documents, document by document in input order
        """
        all_chunks = []

        for document in documents:
            chunks = self.chunk_text(
                text=document.content,
                document_id=document.id,
                document_name=document.filename
            )
            logger.debug(f"Chunked {document.filename}: {len(chunks)} chunks")
            all_chunks.extend(chunks)

        logger.info(f"Created {len(all_chunks)} chunks from {len(documents)} documents")
        return all_chunks

    def chunk_text(self, text: str, document_id: int = 0, document_name: str = "") -> List[Chunk]:
        """
        Split text into windows of chunk_size words starting every
        chunk_size - chunk_overlap words.

        The last window may be shorter than chunk_size; iteration stops once a
        window reaches the end of the text so the tail is never repeated.

        Args:
            text: Text to chunk
            document_id: Source document identifier
            document_name: Source document filename

        Returns:
            Chunks indexed 0..n-1 in reading order, empty for blank text
        """
        words = text.split()
        chunks: List[Chunk] = []

        for start in range(0, len(words), self.step):
            window = words[start:start + self.chunk_size]
            chunk_text = " ".join(window)

            if chunk_text.strip():
                index = len(chunks)
                chunks.append(Chunk(
                    chunk_id=f"{document_id}_{index}",
                    text=chunk_text,
                    document_id=document_id,
                    document_name=document_name,
                    index=index,
                    word_count=len(window)
                ))

            if start + self.chunk_size >= len(words):
                break

        return chunks

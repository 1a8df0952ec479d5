"""Services for DocMind."""
from .chunking_engine import ChunkingEngine
from .relevance_scorer import score_chunk, question_terms, STOP_WORDS
from .retrieval_engine import RetrievalEngine
from .document_loader import DocumentLoader, DocumentLoadError
from .llm_client import LLMClient, LLMResponse, LLMError, LLMClientError, RetryPolicy
from .web_search import WebSearchClient, WebSearchResult, WebSource
from .user_store import UserStore, DuplicateEmailError
from .workspace_store import WorkspaceStore
from .document_store import DocumentStore

__all__ = [
    'ChunkingEngine', 'score_chunk', 'question_terms', 'STOP_WORDS', 'RetrievalEngine',
    'DocumentLoader', 'DocumentLoadError', 'LLMClient', 'LLMResponse', 'LLMError',
    'LLMClientError', 'RetryPolicy', 'WebSearchClient', 'WebSearchResult', 'WebSource',
    'UserStore', 'DuplicateEmailError', 'WorkspaceStore', 'DocumentStore',
]

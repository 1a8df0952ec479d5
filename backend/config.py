"""Configuration management for DocMind document Q&A API."""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# API Keys
GROQ_API_KEY = os.getenv("GROQ_API_KEY")
FIRECRAWL_API_KEY = os.getenv("FIRECRAWL_API_KEY")
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")

# Auth Configuration
JWT_SECRET = os.getenv("JWT_SECRET")
JWT_ALGORITHM = "HS256"
TOKEN_TTL_HOURS = int(os.getenv("TOKEN_TTL_HOURS", "168"))
# bcrypt only hashes the first 72 bytes and newer releases reject longer input
MAX_PASSWORD_BYTES = 72

# Server Configuration
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# CORS Configuration
CORS_ORIGINS = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:3001"
).split(",")

# Model Configuration (tried in order when a model is rate limited)
LLM_FALLBACK_MODELS = (
    "llama-3.3-70b-versatile",
    "llama-3.1-8b-instant",
    "gemma2-9b-it",
)
LLM_RETRY_DELAY_SECONDS = 2.0
LLM_MAX_TOKENS = 2048

# Chunking Configuration
CHUNK_SIZE = 500  # words
CHUNK_OVERLAP = 100  # words

# Retrieval Configuration
SINGLE_DOCUMENT_TOP_K = 5
MULTI_DOCUMENT_TOP_K = 8
PREVIEW_LENGTH = 200
MIN_QUESTION_LENGTH = 3

# Upload Configuration
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB

# Web Search Configuration
FIRECRAWL_API_URL = os.getenv("FIRECRAWL_API_URL", "https://api.firecrawl.dev/v1/search")
WEB_SEARCH_LIMIT = 5
WEB_SNIPPET_LENGTH = 300
WEB_CONTEXT_LENGTH = 2000
WEB_SEARCH_TIMEOUT = 30.0

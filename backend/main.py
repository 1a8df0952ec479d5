"""Main entry point for DocMind document Q&A API."""
import logging
import time
from dataclasses import asdict
from typing import List, Optional

from fastapi import Depends, FastAPI, File, Form, HTTPException, UploadFile, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from config import PORT, LOG_LEVEL, CORS_ORIGINS
from logger import setup_logging
from models.api import (
    ApprovalRequest,
    ApprovalResponse,
    AskRequest,
    AskResponse,
    AuthResponse,
    CitationOut,
    DeepSearchRequest,
    DeepSearchResponse,
    DocumentOut,
    LoginRequest,
    SignupRequest,
    UploadResponse,
    UserOut,
    WebSourceOut,
    WorkspaceCreateRequest,
    WorkspaceOut,
)
from models.chunk import Citation
from models.user import User
from services.auth import AuthError, create_token, decode_token, hash_password, verify_password
from services.chunking_engine import ChunkingEngine
from services.document_loader import DocumentLoader, DocumentLoadError
from services.document_store import DocumentStore
from services.llm_client import LLMClient, LLMClientError, RetryPolicy
from services.retrieval_engine import RetrievalEngine
from services.user_store import DuplicateEmailError, UserStore
from services.web_search import WebSearchClient
from services.workspace_store import WorkspaceStore

# Initialize logging
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="DocMind",
    description="Document Q&A over user workspaces with keyword retrieval and web search",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

security = HTTPBearer(auto_error=False)

# Initialize services (will be done on startup)
user_store: UserStore = None
workspace_store: WorkspaceStore = None
document_store: DocumentStore = None
document_loader: DocumentLoader = None
retrieval_engine: RetrievalEngine = None
llm_client: LLMClient = None
web_search_client: WebSearchClient = None
retry_policy: RetryPolicy = None


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup."""
    global user_store, workspace_store, document_store, document_loader
    global retrieval_engine, llm_client, web_search_client, retry_policy

    setup_logging(LOG_LEVEL)
    logger.info("Initializing DocMind services...")

    try:
        user_store = UserStore()
        workspace_store = WorkspaceStore(user_store.client)
        document_store = DocumentStore(user_store.client)
        logger.info("Initialized Supabase stores")

        document_loader = DocumentLoader()
        retrieval_engine = RetrievalEngine(ChunkingEngine())
        logger.info("Initialized RetrievalEngine")

        llm_client = LLMClient()
        retry_policy = RetryPolicy()
        logger.info(f"Initialized LLMClient (fallback models: {', '.join(retry_policy.models)})")

        web_search_client = WebSearchClient()
        logger.info(f"Initialized WebSearchClient (enabled: {web_search_client.enabled})")

        logger.info("All services initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize services: {e}", exc_info=True)
        raise


# ---------------------------------------------------------------------------
# Auth dependencies
# ---------------------------------------------------------------------------

def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> User:
    """Resolve the bearer token to a user, or fail with 401."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"}
        )

    try:
        claims = decode_token(credentials.credentials)
    except AuthError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"}
        )

    user = user_store.get_by_id(claims.user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return user


def require_approved_user(user: User = Depends(get_current_user)) -> User:
    """Only approved accounts (and admins) may work with documents."""
    if not user.is_approved and not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Your account is pending admin approval"
        )
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Unauthorized")
    return user


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _user_out(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        email=user.email,
        name=user.name,
        role=user.role,
        is_approved=user.is_approved,
        created_at=user.created_at
    )


def _citations_out(citations: List[Citation]) -> List[CitationOut]:
    return [CitationOut(**asdict(citation)) for citation in citations]


def _llm_unavailable(e: LLMClientError) -> HTTPException:
    """Map completion-service failures to 503 with the structured error."""
    logger.error(f"LLM client error: {e.error.message}")
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail={
            "error": {
                "code": e.error.code,
                "message": e.error.message,
                "details": e.error.details
            }
        }
    )


def _internal_error(message: str, e: Exception) -> HTTPException:
    logger.error(f"{message}: {e}", exc_info=True)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------

@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "message": "DocMind API"}


@app.get("/health")
async def health():
    """Detailed health check."""
    return {
        "status": "healthy",
        "service": "docmind",
        "version": "1.0.0",
        "web_search_enabled": bool(web_search_client and web_search_client.enabled)
    }


# ---------------------------------------------------------------------------
# Auth & admin
# ---------------------------------------------------------------------------

@app.post("/api/auth/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup_endpoint(request: SignupRequest) -> AuthResponse:
    """Register an account; it stays inactive until an admin approves it."""
    try:
        user = user_store.create_user(
            email=request.email,
            password_hash=hash_password(request.password),
            name=request.name
        )
    except DuplicateEmailError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        raise _internal_error("Failed to create account", e)

    return AuthResponse(
        message="Account created. Please wait for an admin to approve it.",
        user=_user_out(user)
    )


@app.post("/api/auth/login", response_model=AuthResponse)
def login_endpoint(request: LoginRequest) -> AuthResponse:
    try:
        user = user_store.get_by_email(request.email)
        if user is None or not verify_password(request.password, user.password_hash):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password"
            )
        token = create_token(user)
    except HTTPException:
        raise
    except Exception as e:
        raise _internal_error("Internal server error", e)

    logger.info(f"User {user.id} logged in")
    return AuthResponse(message="Login successful", token=token, user=_user_out(user))


@app.get("/api/auth/me", response_model=UserOut)
def me_endpoint(user: User = Depends(get_current_user)) -> UserOut:
    return _user_out(user)


@app.get("/api/admin/users")
def list_users_endpoint(admin: User = Depends(require_admin)):
    try:
        users = user_store.list_users()
    except Exception as e:
        raise _internal_error("Internal server error", e)
    return {"users": [_user_out(user) for user in users]}


@app.patch("/api/admin/users", response_model=ApprovalResponse)
def approve_user_endpoint(
    request: ApprovalRequest,
    admin: User = Depends(require_admin)
) -> ApprovalResponse:
    try:
        user = user_store.set_approval(request.user_id, request.is_approved)
    except Exception as e:
        raise _internal_error("Internal server error", e)

    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    return ApprovalResponse(
        message=f"User {'approved' if request.is_approved else 'rejected'} successfully",
        user=_user_out(user)
    )


# ---------------------------------------------------------------------------
# Workspaces
# ---------------------------------------------------------------------------

@app.get("/api/workspaces")
def list_workspaces_endpoint(user: User = Depends(require_approved_user)):
    try:
        workspaces = workspace_store.list_workspaces(user.id)
    except Exception as e:
        raise _internal_error("Failed to fetch workspaces", e)
    return {"workspaces": [WorkspaceOut(**asdict(ws)) for ws in workspaces]}


@app.post("/api/workspaces", status_code=status.HTTP_201_CREATED)
def create_workspace_endpoint(
    request: WorkspaceCreateRequest,
    user: User = Depends(require_approved_user)
):
    try:
        workspace = workspace_store.create_workspace(user.id, request.name, request.description)
    except Exception as e:
        raise _internal_error("Failed to create workspace", e)
    return {"workspace": WorkspaceOut(**asdict(workspace))}


@app.delete("/api/workspaces/{workspace_id}")
def delete_workspace_endpoint(workspace_id: int, user: User = Depends(require_approved_user)):
    try:
        deleted = workspace_store.delete_workspace(user.id, workspace_id)
    except Exception as e:
        raise _internal_error("Failed to delete workspace", e)

    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Workspace not found")
    return {"success": True}


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

@app.get("/api/documents")
def list_documents_endpoint(user: User = Depends(require_approved_user)):
    try:
        documents = document_store.list_documents(user.id)
    except Exception as e:
        raise _internal_error("Failed to fetch documents", e)
    return {"documents": [DocumentOut(**asdict(doc)) for doc in documents]}


@app.delete("/api/documents/{document_id}")
def delete_document_endpoint(document_id: int, user: User = Depends(require_approved_user)):
    try:
        deleted = document_store.delete_document(user.id, document_id)
    except Exception as e:
        raise _internal_error("Failed to delete document", e)

    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    return {"success": True}


@app.post("/api/documents/upload", response_model=UploadResponse)
def upload_endpoint(
    file: UploadFile = File(...),
    workspace_id: Optional[int] = Form(None),
    user: User = Depends(require_approved_user)
) -> UploadResponse:
    """Extract the text of a PDF/TXT upload and store it, optionally in a workspace."""
    try:
        if workspace_id is not None and workspace_store.get_workspace(user.id, workspace_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Workspace not found")

        # Reject oversized uploads before buffering them
        if file.size is not None:
            document_loader.check_size(file.size)

        data = file.file.read()
        filename = file.filename or "upload"
        content = document_loader.extract_text(filename, data)

        document = document_store.add_document(
            user_id=user.id,
            filename=filename,
            content=content,
            file_size=len(data),
            workspace_id=workspace_id
        )
    except HTTPException:
        raise
    except DocumentLoadError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        raise _internal_error("Failed to upload document", e)

    return UploadResponse(
        id=document.id,
        filename=document.filename,
        file_size=document.file_size,
        workspace_id=document.workspace_id,
        created_at=document.created_at,
        content_length=len(content)
    )


@app.post("/api/documents/ask", response_model=AskResponse)
def ask_endpoint(request: AskRequest, user: User = Depends(require_approved_user)) -> AskResponse:
    """
    Answer a question from one document or from all documents of a workspace.

    1. Load the documents in scope (404 if there are none)
    2. Retrieve the most relevant chunks
    3. Ask the LLM, falling back across models on rate limits
    4. Return the answer with per-document citations
    """
    start_time = time.time()

    try:
        if request.document_id is not None:
            document = document_store.get_document(user.id, request.document_id)
            documents = [document] if document else []
            not_found = "Document not found"
        else:
            documents = document_store.list_workspace_documents(user.id, request.workspace_id)
            not_found = "No documents found in this workspace"

        if not documents:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found)

        retrieval = retrieval_engine.retrieve(documents, request.question)
        if retrieval.is_empty:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found)

        filename = documents[0].filename if len(documents) == 1 else None
        prompt = LLMClient.build_prompt(request.question, retrieval.context, filename)
        llm_response = llm_client.generate_with_fallback(prompt, retry_policy)

        latency_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"Answered question over {len(documents)} documents "
            f"with {len(retrieval.chunks)} chunks in {latency_ms}ms"
        )

        return AskResponse(
            answer=llm_response.text,
            model_used=llm_response.model_used,
            citations=_citations_out(retrieval.citations)
        )

    except HTTPException:
        raise
    except LLMClientError as e:
        raise _llm_unavailable(e)
    except Exception as e:
        raise _internal_error("Failed to answer question", e)


@app.post("/api/documents/deep-search", response_model=DeepSearchResponse)
def deep_search_endpoint(
    request: DeepSearchRequest,
    user: User = Depends(require_approved_user)
) -> DeepSearchResponse:
    """Answer from web search results blended with a workspace's documents."""
    try:
        web_result = web_search_client.search(request.question)

        doc_context = ""
        doc_sources: List[Citation] = []
        if request.workspace_id is not None:
            documents = document_store.list_workspace_documents(user.id, request.workspace_id)
            if documents:
                retrieval = retrieval_engine.retrieve(documents, request.question)
                doc_context = retrieval.context
                doc_sources = retrieval.citations

        if not doc_context and not web_result.context:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="No results found from documents or web search."
            )

        prompt = LLMClient.build_research_prompt(request.question, doc_context, web_result.context)
        llm_response = llm_client.generate_with_fallback(prompt, retry_policy)

        return DeepSearchResponse(
            answer=llm_response.text,
            model_used=llm_response.model_used,
            doc_sources=_citations_out(doc_sources),
            web_sources=[WebSourceOut(**asdict(source)) for source in web_result.sources],
            has_doc_context=bool(doc_context),
            has_web_context=bool(web_result.context)
        )

    except HTTPException:
        raise
    except LLMClientError as e:
        raise _llm_unavailable(e)
    except Exception as e:
        raise _internal_error("Deep search failed", e)


if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting DocMind API on port {PORT}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)

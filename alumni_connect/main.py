"""
Alumni Connect - Messaging Service

FastAPI backend with:
- Relational record store (PostgreSQL, SQLite for local runs)
- JWT authentication with student / alumni / admin roles
- Contact directory, conversation list and message threads

Run: uvicorn alumni_connect.main:app --reload
"""

import logging

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from alumni_connect.api.routes import api_router
from alumni_connect.core.config import get_settings
from alumni_connect.core.errors import AppError
from alumni_connect.db.database import init_db
from alumni_connect.db.record_store import RecordStore, get_record_store

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Alumni Connect Messaging",
    description="""
    Direct messaging between students, alumni and placement admins.
    
    ## Features
    - **Authentication**: JWT-based auth, role fixed at registration
    - **Contacts**: Role-based directory of who you may message
    - **Conversations**: Last message, unread badge, most recent first
    - **Threads**: Full history, send, read receipts
    
    Clients poll /api/messages/unread-count and /api/messages/conversations
    for new messages; there is no push channel.
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """Every domain failure reaches the client as a tagged JSON body."""
    if exc.status_code >= 500:
        logger.error("%s %s -> %s: %s", request.method, request.url.path, exc.code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Startup event
@app.on_event("startup")
async def startup_event():
    """Create missing tables on startup."""
    try:
        init_db(get_record_store().engine)
        logger.info("✅ Record store initialized")
    except Exception as e:
        logger.warning(f"⚠️ Record store initialization failed: {e}")


@app.get("/health", tags=["Health"])
async def health_check(store: RecordStore = Depends(get_record_store)):
    """Detailed health check."""
    return {
        "status": "healthy",
        "database": "connected" if await store.ping() else "disconnected"
    }

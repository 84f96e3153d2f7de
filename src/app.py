"""Community sharing FastAPI application.

Web server for claims, notifications and notification preferences.
Commands are processed synchronously within each request.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV controls which config overlay is applied:
#   - unset        → event_processing = "sync"  (handlers fire in UoW)
#   - "production" → event_processing = "async" (handlers fire via Engine)
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers
from sharing.domain import sharing  # noqa: E402
from sharing.utils.logging import bind_request_context, clear_request_context

sharing.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Sharing API",
    description="Community resource sharing: claims and notifications",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_DOMAIN_PREFIXES = ("/claims", "/notifications")


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the sharing domain context for domain routes."""
    if request.url.path.startswith(_DOMAIN_PREFIXES):
        bind_request_context(path=request.url.path, user_id=request.headers.get("x-user-id"))
        try:
            with sharing.domain_context():
                response = await call_next(request)
        finally:
            clear_request_context()
        return response
    # Health check, docs, etc.
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from sharing.api.errors import register_sharing_exception_handlers  # noqa: E402
from sharing.api.routes import claim_router, notification_router  # noqa: E402

app.include_router(claim_router)
app.include_router(notification_router)

register_exception_handlers(app)
register_sharing_exception_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": {"name": sharing.name}})

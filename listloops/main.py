"""
ListLoops backend for a single local session.

The process holds one Supabase session and one auth state, shared by every
HTTP caller: anyone who can reach /dashboard or /users/me/profile sees the
user who signed in last. Bind the server to localhost and keep CORS_ORIGINS
limited to the local front end.
"""

import logging
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from typing import Optional

from listloops.config.settings import settings
from listloops.core.dependencies import optional_session
from listloops.database.document_store import DocumentStore
from listloops.database.supabase_client import get_supabase
from listloops.modules.auth.provider import SupabaseIdentityProvider
from listloops.modules.auth.state import AuthStateBridge
from listloops.modules.users.schemas import ViewUser
from listloops.modules.users.service import ProfileStore
from listloops.modules.users import routes as users_routes
from listloops.modules.auth import routes as auth_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.is_production:
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
    return JSONResponse(status_code=500, content={"detail": str(exc)})


class SecurityHeadersMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"].extend([
                    (b"X-Content-Type-Options", b"nosniff"),
                    (b"X-Frame-Options", b"DENY"),
                    (b"X-XSS-Protection", b"1; mode=block"),
                ])
            await send(message)

        await self.app(scope, receive, send_with_headers)


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include module routes
app.include_router(auth_routes.router, prefix="/api/v1")
app.include_router(users_routes.router, prefix="/api/v1")


@app.on_event("startup")
async def startup_event():
    logger.info("Application startup")

    missing = settings.missing_supabase_settings()
    if missing:
        logger.warning(f"Missing Supabase environment variables: {', '.join(missing)}")

    supabase = get_supabase()
    bridge = AuthStateBridge(
        SupabaseIdentityProvider(supabase),
        ProfileStore(DocumentStore(supabase)),
    )
    app.state.auth_bridge = bridge
    bridge.start()


@app.on_event("shutdown")
async def shutdown_event():
    bridge = getattr(app.state, "auth_bridge", None)
    if bridge is not None:
        bridge.stop()
    logger.info("Application shutdown")


@app.get("/")
async def root(user: Optional[ViewUser] = Depends(optional_session)):
    return {"message": "Welcome to listloops", "status": "healthy", "user": user}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready():
    """Readiness probe: ready once the auth state has settled."""
    bridge = getattr(app.state, "auth_bridge", None)
    if bridge is None or bridge.state.is_loading:
        return JSONResponse(status_code=503, content={"status": "loading"})
    return {"status": "ready"}

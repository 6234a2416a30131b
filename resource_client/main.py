from datetime import datetime, timezone

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from .config import get_settings
from .auth.exceptions import (
    AuthenticationError,
    CurrentUserLookupError,
    ResourceClientError,
)
from .auth.router import router as auth_router
from .invoke.exceptions import ResourceInvokeError

settings = get_settings()

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Shared HTTP client for connection pooling
    # timeout=None removes the client-side default; the gateway enforces timeoutMs
    app.state.http_client = httpx.AsyncClient(timeout=None)
    
    yield
    
    await app.state.http_client.aclose()

app = FastAPI(
    title=settings.APP_NAME,
    lifespan=lifespan,
    debug=settings.DEBUG
)

# Global exception handlers
@app.exception_handler(AuthenticationError)
async def authentication_exception_handler(request: Request, exc: AuthenticationError):
    return JSONResponse(
        status_code=401,
        content={"error": exc.code, "message": exc.message}
    )

@app.exception_handler(CurrentUserLookupError)
async def current_user_lookup_handler(request: Request, exc: CurrentUserLookupError):
    status_code = exc.status_code if exc.status_code in (401, 403) else 502
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.code, "message": exc.message}
    )

@app.exception_handler(ResourceInvokeError)
async def resource_invoke_handler(request: Request, exc: ResourceInvokeError):
    return JSONResponse(
        status_code=502,
        content={"error": exc.code, "message": exc.message, "requestId": exc.request_id}
    )

@app.exception_handler(ResourceClientError)
async def resource_client_exception_handler(request: Request, exc: ResourceClientError):
    return JSONResponse(
        status_code=500,
        content={"error": exc.code, "message": exc.message}
    )

@app.get("/api/healthz")
async def health_check():
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    }

# Include routers
app.include_router(auth_router)

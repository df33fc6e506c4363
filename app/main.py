# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Spark Links API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   poetry run uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import (
    SparkLinksException,
    backend_exception_handler,
    sparklinks_exception_handler,
)
from app.middleware import RouteGuardMiddleware
from app.routers import applications, health, invitations, profile, projects, talents
from app.auth import routes as auth_routes
from lib.supabase_client import SupabaseClientError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs the effective configuration on startup and the shutdown itself.
    """
    logger.info(f"Starting Spark Links API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    logger.info(f"Protected paths: {settings.protected_path_prefixes_list}")

    yield

    logger.info("Shutting down Spark Links API")


# Create FastAPI application
app = FastAPI(
    title="Spark Links API",
    description="""
## Co-founder & Startup Team Matchmaking API

Spark Links lets people publish project listings, browse a talent directory
and exchange applications and invitations to join project teams.

### How It Works

1. **Register & fill in a profile** - skills, availability, what partner you look for
2. **Publish a project** - roles and skills the team still needs
3. **Apply or invite** - users apply to projects, creators invite talents
4. **Respond** - accept (the user joins the team) or reject with a reason

### Request Lifecycle

| Status | Next |
|--------|------|
| **pending** | accepted, rejected, or withdrawn by the sender |
| **accepted** | terminal; the user is a team member |
| **rejected** | terminal |

### Quick Start

```bash
# 1. Sign in
curl -X POST http://localhost:8000/api/v1/auth/login \\
  -H "Content-Type: application/json" \\
  -d '{"email": "ming@example.com", "password": "Secret123"}'

# 2. Browse projects
curl "http://localhost:8000/api/v1/projects?skills=Python&stage=idea"

# 3. Apply
curl -X POST http://localhost:8000/api/v1/projects/{id}/applications \\
  -H "Authorization: Bearer $TOKEN"
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Registration, sign-in and the current user",
        },
        {
            "name": "Projects",
            "description": "Browse, create and manage project listings",
        },
        {
            "name": "Talents",
            "description": "Public talent directory",
        },
        {
            "name": "Profile",
            "description": "Own profile and avatar",
        },
        {
            "name": "Applications",
            "description": "Applications to join projects",
        },
        {
            "name": "Invitations",
            "description": "Invitations to join projects",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# Page route protection (signed-out -> login, signed-in -> away from login)
app.add_middleware(RouteGuardMiddleware)

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(SparkLinksException)
async def handle_sparklinks_exception(request: Request, exc: SparkLinksException):
    """Handle custom Spark Links exceptions."""
    return await sparklinks_exception_handler(request, exc)


@app.exception_handler(SupabaseClientError)
async def handle_backend_exception(request: Request, exc: SupabaseClientError):
    """Handle backend failures raised by the Supabase wrapper."""
    logger.error(f"Backend error on {request.url.path}: {exc}")
    return await backend_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints (router carries its own /auth prefix)
app.include_router(
    auth_routes.router,
    prefix="/api/v1",
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Project endpoints
app.include_router(
    projects.router,
    prefix="/api/v1/projects",
    tags=["Projects"]
)

# Talent directory endpoints
app.include_router(
    talents.router,
    prefix="/api/v1/talents",
    tags=["Talents"]
)

# Own profile endpoints
app.include_router(
    profile.router,
    prefix="/api/v1/profile",
    tags=["Profile"]
)

# Application endpoints
app.include_router(
    applications.router,
    prefix="/api/v1/applications",
    tags=["Applications"]
)

# Invitation endpoints
app.include_router(
    invitations.router,
    prefix="/api/v1/invitations",
    tags=["Invitations"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Spark Links API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }

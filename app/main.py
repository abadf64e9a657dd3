# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Contacts Directory API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
#   contacts-api            # console script, binds API_HOST:API_PORT
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import (
    ContactsException,
    contacts_exception_handler,
    validation_exception_handler,
)
from app.routers import contacts, health

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

    Runs on startup and shutdown.
    """
    logger.info(f"Starting Contacts Directory API in {settings.ENVIRONMENT} mode")
    logger.info(f"Contact store backend: {settings.STORE_BACKEND}")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    if not settings.JWT_EXPIRE_MINUTES:
        logger.warning("JWT_EXPIRE_MINUTES is not set; issued tokens never expire")

    yield

    logger.info("Shutting down Contacts Directory API")


# Create FastAPI application
app = FastAPI(
    title="Contacts Directory API",
    description="""
## Contacts Directory

Create, list, fetch, update and delete contacts, and log in with a contact's
email and password to receive a bearer token.

### Quick Start

```bash
# Create a contact
curl -X POST http://localhost:8000/ \\
  -H "Content-Type: application/json" \\
  -d '{"firstName": "Ada", "lastName": "Lovelace", "email": "ada@example.com", "phone": "555-0100", "password": "secret1"}'

# Log in
curl -X POST http://localhost:8000/login \\
  -H "Content-Type: application/json" \\
  -d '{"email": "ada@example.com", "password": "secret1"}'
```

Every failure is returned as `{"errors": [{"msg": ..., "code": ...}]}`.
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Contacts",
            "description": "Contact CRUD and login",
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

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=settings.is_production,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

app.add_exception_handler(ContactsException, contacts_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "errors": [
                {"msg": "An unexpected error occurred", "code": "INTERNAL_ERROR"}
            ]
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Health check endpoints (before contacts so /health is not read as an id)
app.include_router(
    health.router,
    tags=["Health"]
)

# Contact endpoints, mounted at the root
app.include_router(
    contacts.router,
    tags=["Contacts"]
)


def run() -> None:
    """Serve the API with uvicorn on API_HOST:API_PORT."""
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.is_development and settings.DEBUG,
    )


if __name__ == "__main__":
    run()

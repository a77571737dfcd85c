"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tekyoflow.api.v1 import router as v1_router
from tekyoflow.core.config import APP_VERSION, settings
from tekyoflow.core.errors import register_exception_handlers
from tekyoflow.core.logging import configure_logging

configure_logging(settings.LOG_LEVEL)

app = FastAPI(
    title="TekyoFlow API",
    version=APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_origins != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
    # Profile updates hand the refreshed token back in this header.
    expose_headers=["Authorization"],
)

app.include_router(v1_router, prefix=settings.API_PREFIX)


@app.get("/")
def root() -> dict[str, int | str]:
    """Root route; minimal payload for discovery."""
    return {"status": 200, "message": "TekyoFlow API"}

"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from app.api import router as api_router
from app.core.background import drain_background_tasks


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Let in-flight session saves and profile updates finish
    await drain_background_tasks()


app = FastAPI(
    title="Training Coach Engine",
    description="Retrieval-augmented streaming coach that drafts structured training plans",
    version="0.1.0",
    lifespan=lifespan,
)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(content={"status": "ok"}, status_code=200)


# Include v1 API router
app.include_router(api_router, prefix="/v1", tags=["v1"])

"""API router for v1 endpoints."""

from fastapi import APIRouter

from app.api import coach, coach_documents, coach_plans

router = APIRouter()

# Streaming coach conversation
router.include_router(coach.router, tags=["coach"])

# Training resource uploads
router.include_router(coach_documents.router, tags=["coach_documents"])

# Saving generated plans
router.include_router(coach_plans.router, tags=["coach_plans"])

"""Pydantic schemas for the AI coach conversation pipeline."""

import datetime as dt
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that speaks camelCase on the wire and snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Conversation
# ============================================================================


class MessageRole(str, Enum):
    """Author of a conversation message."""
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class Message(BaseModel):
    """A single conversation message. Never mutated once sent."""

    model_config = ConfigDict(frozen=True)

    role: MessageRole
    content: str


class CoachRequest(CamelModel):
    """Request body for a coach conversation turn."""

    messages: list[Message] = Field(..., min_length=1)
    current_date: Optional[dt.date] = None


# ============================================================================
# Retrieval
# ============================================================================


class RetrievedDocument(BaseModel):
    """A training-document chunk returned by similarity search.

    Produced per query and never persisted by the coach pipeline.
    """

    title: str
    content: str
    document_type: str = "research"
    authors: list[str] = Field(default_factory=list)
    similarity: float = Field(..., ge=0.0, le=1.0)

    @property
    def citation_tag(self) -> str:
        """Citation tag in the form ``[Author1, Author2, Title]``."""
        authors = [a for a in self.authors if a and a.strip()] or ["Unknown"]
        return "[" + ", ".join([*authors, self.title]) + "]"

    @property
    def similarity_percent(self) -> int:
        return round(self.similarity * 100)


class SourceSummary(CamelModel):
    """Retrieved-document summary reported to the caller for transparency."""

    title: str
    authors: list[str]
    similarity: float


# ============================================================================
# Workout plans
# ============================================================================


class RunWorkout(CamelModel):
    """A planned run."""

    title: str
    date: dt.date
    type: Literal["run"] = "run"
    run_type: str
    distance: float
    pace: Optional[str] = None
    notes: Optional[str] = None


class WeightliftingWorkout(CamelModel):
    """A planned strength session."""

    title: str
    date: dt.date
    type: Literal["weightlifting"] = "weightlifting"
    focus_area: str
    duration: str
    notes: Optional[str] = None


Workout = Annotated[Union[RunWorkout, WeightliftingWorkout], Field(discriminator="type")]


class WorkoutPlan(CamelModel):
    """A validated workout plan, as stored by the save-plan boundary."""

    plan_name: str
    plan_description: str = ""
    target_race: Optional[str] = None
    duration: Optional[str] = None
    workouts: list[Workout] = Field(default_factory=list)


# ============================================================================
# Stream events
# ============================================================================


class TextDeltaEvent(CamelModel):
    """Incremental assistant text, forwarded in upstream order."""

    type: Literal["textDelta"] = "textDelta"
    text: str


class CompleteEvent(CamelModel):
    """Terminal event for a successful turn."""

    type: Literal["complete"] = "complete"
    plan_found: bool = False
    plan: Optional[dict[str, Any]] = None
    parse_error: bool = False
    parse_error_message: Optional[str] = None
    raw_json_string: Optional[str] = None
    citations: list[str] = Field(default_factory=list)
    sources: list[SourceSummary] = Field(default_factory=list)


class ErrorEvent(CamelModel):
    """Terminal event for a failed turn."""

    type: Literal["error"] = "error"
    message: str


StreamEvent = Union[TextDeltaEvent, CompleteEvent, ErrorEvent]


# ============================================================================
# Persistence
# ============================================================================


class ConversationRecord(BaseModel):
    """Append-only log entry for a completed coach exchange."""

    user_id: str
    conversation: list[Message]
    plan_generated: bool
    workouts_created: int = 0


class TrainingProfile(BaseModel):
    """Training profile derived from what the runner said."""

    experience_level: Optional[str] = None
    weekly_mileage: Optional[Union[float, str]] = None
    target_race: Optional[str] = None
    pace_information: Optional[Any] = None
    injury_history: Optional[Any] = None

    def is_empty(self) -> bool:
        return all(value is None for value in self.model_dump().values())


class SavePlanRequest(CamelModel):
    """Request body for persisting a generated plan."""

    workout_plan: dict[str, Any]
    conversation_id: Optional[str] = None


class SavePlanResponse(CamelModel):
    """Outcome of persisting a generated plan."""

    success: bool
    training_plan_id: str
    saved_workouts: int
    total_workouts: int
    valid_workouts: int

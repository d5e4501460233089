from typing import Any, Literal

from pydantic import BaseModel, Field


# =============================================================================
# Client -> Server Messages
# =============================================================================


class SessionStartData(BaseModel):
    """Data for session start."""

    user_id: str | None = Field(None, description="Stored profile to load; a new one is created when empty")
    duel: bool = Field(False, description="Play a fixed duel batch instead of the adaptive feed")
    duel_task_count: int | None = Field(None, ge=1, le=100, description="Override the configured batch size")


class TaskResultData(BaseModel):
    """Renderer completion callback for a task."""

    task_id: str = Field(..., description="Task identifier")
    success: bool = Field(..., description="Whether the completion condition was met")
    time_spent_ms: float = Field(..., ge=0, description="Engaged time in milliseconds")


class SessionEndData(BaseModel):
    """Data for session end."""

    session_id: str | None = Field(None, description="Session identifier")


class ClientMessage(BaseModel):
    """Union of all client message types."""

    type: Literal["session_start", "task_result", "advance", "pause", "resume", "session_end"]
    data: dict[str, Any] = Field(default_factory=dict)


# =============================================================================
# Server -> Client Messages
# =============================================================================


class ConnectedMessage(BaseModel):
    """Connection confirmation."""

    type: Literal["connected"] = "connected"
    session_id: str = Field(..., description="Assigned connection identifier")

    def model_dump(self, **kwargs: Any) -> dict[str, Any]:
        return {
            "type": self.type,
            "data": {
                "sessionId": self.session_id,
            },
        }


class SessionMessage(BaseModel):
    """Feed session opened for a profile."""

    type: Literal["session"] = "session"
    session_id: str = Field(..., description="Feed session identifier")
    user_id: str = Field(..., description="Profile the session plays against")
    duel: bool = Field(False)
    task_count: int = Field(..., description="Tasks in the initial delivery")

    def model_dump(self, **kwargs: Any) -> dict[str, Any]:
        return {
            "type": self.type,
            "data": {
                "sessionId": self.session_id,
                "userId": self.user_id,
                "duel": self.duel,
                "taskCount": self.task_count,
            },
        }


class TaskMessage(BaseModel):
    """A task for the renderer; `position` is its index in the session."""

    type: Literal["task"] = "task"
    position: int = Field(..., ge=0)
    task: dict[str, Any] = Field(..., description="Serialized task (camelCase)")

    def model_dump(self, **kwargs: Any) -> dict[str, Any]:
        return {
            "type": self.type,
            "data": {
                "position": self.position,
                "task": self.task,
            },
        }


class DifficultyMessage(BaseModel):
    """Difficulty adjustment notification."""

    type: Literal["difficulty"] = "difficulty"
    task_type: str = Field(..., description="Task type whose level was regulated")
    previous_level: float = Field(..., ge=1)
    level: float = Field(..., ge=1, description="New level (integer for windowed types)")
    decision: str = Field(..., description="Regulator decision label")
    confidence: float | None = Field(None, ge=0, le=1)

    def model_dump(self, **kwargs: Any) -> dict[str, Any]:
        return {
            "type": self.type,
            "data": {
                "taskType": self.task_type,
                "previousLevel": self.previous_level,
                "level": self.level,
                "decision": self.decision,
                "confidence": self.confidence,
            },
        }


class ResultMessage(BaseModel):
    """Acknowledges a recorded result."""

    type: Literal["result"] = "result"
    task_id: str
    outcome: str
    time_spent_ms: float

    def model_dump(self, **kwargs: Any) -> dict[str, Any]:
        return {
            "type": self.type,
            "data": {
                "taskId": self.task_id,
                "outcome": self.outcome,
                "timeSpentMs": self.time_spent_ms,
            },
        }


class SessionEndedMessage(BaseModel):
    type: Literal["session_ended"] = "session_ended"
    session_id: str
    results: int

    def model_dump(self, **kwargs: Any) -> dict[str, Any]:
        return {
            "type": self.type,
            "data": {
                "sessionId": self.session_id,
                "results": self.results,
            },
        }


class ErrorMessage(BaseModel):
    """Error notification."""

    type: Literal["error"] = "error"
    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")

    def model_dump(self, **kwargs: Any) -> dict[str, Any]:
        return {
            "type": self.type,
            "data": {
                "code": self.code,
                "message": self.message,
            },
        }

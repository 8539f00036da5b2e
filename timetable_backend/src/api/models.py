from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class SemesterRecord(BaseModel):
    """A semester as stored; nested records are opaque."""

    model_config = ConfigDict(extra="allow")

    courses: list[Any] = Field(default_factory=list, description="Course records")
    teachers: list[Any] = Field(default_factory=list, description="Teacher records")
    subjects: list[Any] = Field(default_factory=list, description="Subject records")
    schedule: list[Any] = Field(default_factory=list, description="Schedule entries")
    currentCollege: str = Field("Moss Vale", description="Selected college")


class SaveDataRequest(BaseModel):
    data: Optional[dict[str, Any]] = Field(None, description="Complete timetable document")


class CreateSemesterRequest(BaseModel):
    name: Optional[str] = Field(None, description="Name of the semester to create")


class DataResponse(BaseModel):
    success: bool = Field(True, description="Whether the request succeeded")
    data: Any = Field(..., description="Requested document or semester")


class MessageResponse(BaseModel):
    success: bool = Field(True, description="Whether the request succeeded")
    message: str = Field(..., description="Outcome message")


class SemesterCreatedResponse(MessageResponse):
    data: SemesterRecord = Field(..., description="The created semester")


class HealthResponse(MessageResponse):
    timestamp: str = Field(..., description="Current server time (ISO, UTC)")


class ErrorResponse(BaseModel):
    success: bool = Field(False, description="Always false")
    error: str = Field(..., description="Error message")

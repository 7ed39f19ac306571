"""
Pydantic schemas for background task status.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class TaskProgressInfo(BaseModel):
    """Task progress information."""

    percent: Optional[int] = Field(None, ge=0, le=100, description="Progress percentage (0-100)")
    current: Optional[int] = Field(None, description="Items processed so far")
    total: Optional[int] = Field(None, description="Total items to process")
    message: Optional[str] = Field(None, description="Human-readable progress message")


class TaskDispatchResponse(BaseModel):
    task_id: str = Field(..., description="Celery task ID")
    status: str = Field(default="queued", description="Task status")
    message: str = Field(..., description="What was queued")


class TaskStatusResponse(BaseModel):
    task_id: str = Field(..., description="Celery task ID")
    status: str = Field(..., description="PENDING, STARTED, PROGRESS, SUCCESS or FAILURE")
    progress: Optional[TaskProgressInfo] = None
    result: Optional[Dict[str, Any]] = Field(None, description="Task result if completed")
    error: Optional[str] = Field(None, description="Error message if failed")

"""
Admin Endpoints
Background task status and history.

Endpoints:
GET /api/v1/admin/task-status/{task_id} - Check Celery task status
GET /api/v1/admin/tasks                 - Recent task executions
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ...db.models import TaskExecution
from ...tasks.progress import get_execution
from ..dependencies import get_db, verify_api_key
from ..errors import APIError
from ..schemas.tasks import TaskProgressInfo, TaskStatusResponse

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/admin", tags=["admin"], dependencies=[Depends(verify_api_key)]
)


def _progress_from_meta(meta: Any) -> Optional[TaskProgressInfo]:
    if not isinstance(meta, dict):
        return None
    return TaskProgressInfo(
        percent=meta.get("percent"),
        current=meta.get("current"),
        total=meta.get("total"),
        message=meta.get("message"),
    )


def _progress_from_execution(execution: TaskExecution) -> TaskProgressInfo:
    return TaskProgressInfo(
        percent=execution.progress_percent,
        current=execution.progress_current,
        total=execution.progress_total,
        message=execution.progress_message,
    )


@router.get(
    "/task-status/{task_id}", response_model=TaskStatusResponse, status_code=status.HTTP_200_OK
)
def get_task_status(task_id: str, db: Session = Depends(get_db)) -> TaskStatusResponse:
    """
    Check the status of a Celery task.

    Live state comes from the result backend; once the backend has expired
    the task (it reports PENDING again) the execution record is used.
    """
    try:
        from celery.result import AsyncResult

        from ...tasks.celery_app import app as celery_app

        task_result = AsyncResult(task_id, app=celery_app)
        status_str = task_result.status
        info = task_result.info
    except Exception as e:
        logger.error(f"Failed to get task status: {e}", exc_info=True)
        raise APIError(f"Failed to get task status: {e}")

    execution = get_execution(db, task_id)
    if status_str == "PENDING" and execution is not None and execution.status != "PENDING":
        return TaskStatusResponse(
            task_id=task_id,
            status=execution.status,
            progress=_progress_from_execution(execution),
            result=execution.result,
            error=execution.error,
        )

    response = TaskStatusResponse(task_id=task_id, status=status_str)

    if status_str == "PROGRESS":
        response.progress = _progress_from_meta(info)
    elif status_str == "SUCCESS":
        response.result = info if isinstance(info, dict) else {"value": info}
        response.progress = TaskProgressInfo(percent=100)
    elif status_str == "FAILURE":
        response.error = str(info)

    return response


@router.get("/tasks")
def recent_tasks(
    limit: int = Query(20, ge=1, le=200),
    task_name: Optional[str] = None,
    db: Session = Depends(get_db),
) -> List[Dict[str, Any]]:
    query = db.query(TaskExecution)
    if task_name:
        query = query.filter(TaskExecution.task_name == task_name)
    executions = query.order_by(TaskExecution.created_at.desc()).limit(limit).all()

    return [
        {
            "task_id": e.task_id,
            "task_name": e.task_name,
            "status": e.status,
            "progress": _progress_from_execution(e).model_dump(),
            "error": e.error,
            "created_at": e.created_at.isoformat() if e.created_at else None,
            "completed_at": e.completed_at.isoformat() if e.completed_at else None,
        }
        for e in executions
    ]

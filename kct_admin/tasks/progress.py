"""
Task execution tracking.
Publishes Celery PROGRESS state and mirrors it to the task_executions table.
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ..db.models import TaskExecution, utcnow

logger = logging.getLogger(__name__)


def get_execution(session: Session, task_id: str) -> Optional[TaskExecution]:
    return session.query(TaskExecution).filter(TaskExecution.task_id == task_id).first()


def record_task(
    session: Session,
    task_id: str,
    task_name: str,
    status: str = "PENDING",
    **fields: Any,
) -> TaskExecution:
    """Create or update the execution record for a task."""
    execution = get_execution(session, task_id)
    if execution is None:
        execution = TaskExecution(task_id=task_id, task_name=task_name)
        session.add(execution)

    execution.status = status
    for key, value in fields.items():
        setattr(execution, key, value)
    if status in ("SUCCESS", "FAILURE", "REVOKED") and execution.completed_at is None:
        execution.completed_at = utcnow()

    session.commit()
    return execution


class ProgressReporter:
    """
    Progress callback for long-running tasks.

    Call it with (current, total, message); it updates the Celery task
    state and the execution record.
    """

    def __init__(self, task, session: Session, task_name: str):
        self.task = task
        self.session = session
        self.task_name = task_name
        self.task_id = task.request.id

    def meta(self, current: int, total: int, message: str = "") -> Dict[str, Any]:
        percent = min(100, int(100 * current / total)) if total else 0
        return {"current": current, "total": total, "percent": percent, "message": message}

    def __call__(self, current: int, total: int, message: str = "") -> None:
        meta = self.meta(current, total, message)
        self.task.update_state(state="PROGRESS", meta=meta)
        if self.task_id:
            record_task(
                self.session,
                self.task_id,
                self.task_name,
                status="PROGRESS",
                progress_current=current,
                progress_total=total,
                progress_message=message or None,
            )
        logger.debug(f"{self.task_name} progress {meta['percent']}%")

    def started(self, total: int) -> None:
        if self.task_id:
            record_task(self.session, self.task_id, self.task_name, status="STARTED",
                        progress_current=0, progress_total=total)

    def finished(self, result: Dict[str, Any]) -> None:
        if self.task_id:
            record_task(self.session, self.task_id, self.task_name, status="SUCCESS",
                        result=result)

    def failed(self, error: str) -> None:
        if self.task_id:
            self.session.rollback()
            record_task(self.session, self.task_id, self.task_name, status="FAILURE",
                        error=error)

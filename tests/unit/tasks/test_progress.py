"""
Tests for task execution records and progress reporting.
"""

from types import SimpleNamespace

from kct_admin.db.models import TaskExecution
from kct_admin.tasks.progress import ProgressReporter, get_execution, record_task


class FakeTask:
    def __init__(self, task_id="task-1"):
        self.request = SimpleNamespace(id=task_id)
        self.states = []

    def update_state(self, state=None, meta=None):
        self.states.append((state, meta))


def test_record_task_creates_then_updates(db_session):
    record_task(db_session, "abc", "tasks.import_product_csv", progress_total=10)
    record_task(db_session, "abc", "tasks.import_product_csv", status="PROGRESS", progress_current=5)

    execution = get_execution(db_session, "abc")
    assert execution.status == "PROGRESS"
    assert execution.progress_percent == 50
    assert execution.completed_at is None
    assert db_session.query(TaskExecution).count() == 1


def test_terminal_states_set_completed_at(db_session):
    record_task(db_session, "abc", "tasks.refresh_vendor_inventory", status="SUCCESS", result={"ok": 1})
    execution = get_execution(db_session, "abc")
    assert execution.completed_at is not None
    assert execution.result == {"ok": 1}


def test_get_execution_missing(db_session):
    assert get_execution(db_session, "nope") is None


def test_reporter_publishes_state_and_record(db_session):
    task = FakeTask()
    reporter = ProgressReporter(task, db_session, "tasks.import_vendor_products")

    reporter.started(4)
    reporter(1, 4, "Processed 1 of 4")

    assert task.states == [
        ("PROGRESS", {"current": 1, "total": 4, "percent": 25, "message": "Processed 1 of 4"})
    ]
    execution = get_execution(db_session, "task-1")
    assert execution.status == "PROGRESS"
    assert execution.progress_message == "Processed 1 of 4"

    reporter.finished({"status": "success"})
    assert get_execution(db_session, "task-1").status == "SUCCESS"


def test_reporter_failure_records_error(db_session):
    reporter = ProgressReporter(FakeTask("task-2"), db_session, "tasks.import_product_csv")
    reporter.failed("bad file")

    execution = get_execution(db_session, "task-2")
    assert execution.status == "FAILURE"
    assert execution.error == "bad file"


def test_reporter_without_task_id_only_updates_state(db_session):
    task = FakeTask(task_id=None)
    reporter = ProgressReporter(task, db_session, "tasks.import_product_csv")

    reporter(0, 0)
    reporter.finished({})

    assert task.states == [("PROGRESS", {"current": 0, "total": 0, "percent": 0, "message": ""})]
    assert db_session.query(TaskExecution).count() == 0

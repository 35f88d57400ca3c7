"""Tests for the task service: authentication, ownership and validation rules."""

import pytest

from task_manager.errors import Forbidden, InvalidInput, NotFound, Unauthenticated
from task_manager.models import TaskPriority, TaskStatus
from task_manager.schemas.task import TaskCreate, TaskUpdate
from task_manager.services import tasks as task_service


def _new(session, caller="U1", **fields):
    fields.setdefault("title", "Task")
    fields.setdefault("priority", TaskPriority.MEDIUM)
    return task_service.create(session, caller, TaskCreate(**fields))


class TestCreate:
    def test_defaults_status_to_todo_and_scopes_to_owner(self, session) -> None:
        task_id = _new(session, title="Buy milk", priority="low")

        task = task_service.get(session, "U1", task_id)
        assert task.status == TaskStatus.TODO
        assert task.priority == TaskPriority.LOW
        assert [t.id for t in task_service.list_tasks(session, "U1")] == [task_id]
        assert task_service.list_tasks(session, "U2") == []

    def test_title_and_description_are_trimmed(self, session) -> None:
        task_id = _new(session, title="  Pay rent  ", description="  by Friday ")

        task = task_service.get(session, "U1", task_id)
        assert task.title == "Pay rent"
        assert task.description == "by Friday"

    def test_get_after_create_has_equal_timestamps(self, session, clock) -> None:
        task_id = _new(session, due_date=1234, status="in-progress")

        task = task_service.get(session, "U1", task_id)
        assert task.created_at == task.updated_at == clock.now
        assert task.due_date == 1234
        assert task.status == TaskStatus.IN_PROGRESS

    @pytest.mark.parametrize(
        "fields",
        [
            {"title": "   "},
            {"title": "t" * 201},
            {"description": "d" * 2001},
            {"due_date": -5},
            {"due_date": float("nan")},
        ],
    )
    def test_invalid_fields_rejected(self, session, fields) -> None:
        with pytest.raises(InvalidInput):
            _new(session, **fields)
        assert task_service.list_tasks(session, "U1") == []

    def test_requires_authentication(self, session) -> None:
        with pytest.raises(Unauthenticated):
            _new(session, caller=None)


class TestFilters:
    def test_list_variants_never_leak_other_users(self, session, clock) -> None:
        mine = _new(session, priority="high", status="done", due_date=10)
        clock.advance()
        _new(session, caller="U2", priority="high", status="done", due_date=5)

        assert [t.id for t in task_service.list_by_status(session, "U1", TaskStatus.DONE)] == [mine]
        assert [t.id for t in task_service.list_by_priority(session, "U1", TaskPriority.HIGH)] == [mine]
        assert [t.id for t in task_service.list_by_due_date(session, "U1")] == [mine]

    def test_list_by_due_date_orders_undated_first(self, session, clock) -> None:
        for due_date in (None, 100, 50):
            _new(session, due_date=due_date)
            clock.advance()

        assert [t.due_date for t in task_service.list_by_due_date(session, "U1")] == [None, 50, 100]

    @pytest.mark.parametrize(
        "call",
        [
            lambda s: task_service.list_tasks(s, None),
            lambda s: task_service.list_by_status(s, None, TaskStatus.TODO),
            lambda s: task_service.list_by_priority(s, None, TaskPriority.LOW),
            lambda s: task_service.list_by_due_date(s, ""),
        ],
    )
    def test_listing_requires_authentication(self, session, call) -> None:
        with pytest.raises(Unauthenticated):
            call(session)


class TestUpdate:
    def test_changes_only_supplied_fields(self, session, clock) -> None:
        task_id = _new(session, title="Write report", description="draft", priority="low", due_date=99)
        before = task_service.get(session, "U1", task_id)
        created_at, updated_at = before.created_at, before.updated_at
        clock.advance(5)

        task = task_service.update(session, "U1", task_id, TaskUpdate(priority="high"))

        assert task.priority == TaskPriority.HIGH
        assert task.title == "Write report"
        assert task.description == "draft"
        assert task.due_date == 99
        assert task.user_id == "U1"
        assert task.created_at == created_at
        assert task.updated_at >= updated_at

    def test_sanitizes_and_validates_supplied_fields(self, session) -> None:
        task_id = _new(session)

        task = task_service.update(session, "U1", task_id, TaskUpdate(title="  Renamed "))
        assert task.title == "Renamed"

        with pytest.raises(InvalidInput):
            task_service.update(session, "U1", task_id, TaskUpdate(title=" "))
        with pytest.raises(InvalidInput):
            task_service.update(session, "U1", task_id, TaskUpdate(description="d" * 2001))
        with pytest.raises(InvalidInput):
            task_service.update(session, "U1", task_id, TaskUpdate(due_date=-1))
        assert task_service.get(session, "U1", task_id).title == "Renamed"

    def test_explicit_null_clears_optional_fields(self, session) -> None:
        task_id = _new(session, description="notes", due_date=500)

        task = task_service.update(session, "U1", task_id, TaskUpdate(description=None, due_date=None))

        assert task.description is None
        assert task.due_date is None

    @pytest.mark.parametrize("field", ["title", "priority", "status"])
    def test_explicit_null_rejected_for_required_fields(self, session, field) -> None:
        task_id = _new(session)
        with pytest.raises(InvalidInput, match=field):
            task_service.update(session, "U1", task_id, TaskUpdate(**{field: None}))

    def test_done_can_be_reopened(self, session) -> None:
        task_id = _new(session)
        task_service.mark_complete(session, "U1", task_id)

        task = task_service.update(session, "U1", task_id, TaskUpdate(status="in-progress"))
        assert task.status == TaskStatus.IN_PROGRESS


class TestMarkComplete:
    def test_is_idempotent(self, session) -> None:
        task_id = _new(session)

        task_service.mark_complete(session, "U1", task_id)
        task = task_service.mark_complete(session, "U1", task_id)

        assert task.status == TaskStatus.DONE


class TestVanishedRecords:
    """The task disappears between the ownership check and the write."""

    def test_update_of_vanished_task_is_not_found(self, session, monkeypatch) -> None:
        task_id = _new(session)
        monkeypatch.setattr(task_service.task_store, "update_task", lambda *args, **kwargs: None)

        with pytest.raises(NotFound):
            task_service.update(session, "U1", task_id, TaskUpdate(title="late"))

    def test_mark_complete_of_vanished_task_is_not_found(self, session, monkeypatch) -> None:
        task_id = _new(session)
        monkeypatch.setattr(task_service.task_store, "mark_task_complete", lambda *args, **kwargs: None)

        with pytest.raises(NotFound):
            task_service.mark_complete(session, "U1", task_id)


class TestRemove:
    def test_deletes_permanently(self, session) -> None:
        task_id = _new(session)
        task_service.remove(session, "U1", task_id)

        with pytest.raises(NotFound):
            task_service.get(session, "U1", task_id)


OWNED_OPERATIONS = {
    "get": lambda s, caller, task_id: task_service.get(s, caller, task_id),
    "update": lambda s, caller, task_id: task_service.update(s, caller, task_id, TaskUpdate(title="x")),
    "mark_complete": lambda s, caller, task_id: task_service.mark_complete(s, caller, task_id),
    "remove": lambda s, caller, task_id: task_service.remove(s, caller, task_id),
}


class TestOwnership:
    @pytest.mark.parametrize("operation", sorted(OWNED_OPERATIONS))
    def test_non_owner_is_forbidden(self, session, operation) -> None:
        task_id = _new(session, title="Private")

        with pytest.raises(Forbidden):
            OWNED_OPERATIONS[operation](session, "U2", task_id)

        task = task_service.get(session, "U1", task_id)
        assert task.title == "Private"
        assert task.status == TaskStatus.TODO

    @pytest.mark.parametrize("operation", sorted(OWNED_OPERATIONS))
    @pytest.mark.parametrize("caller", ["U1", "U2"])
    def test_missing_task_is_not_found_for_any_caller(self, session, operation, caller) -> None:
        _new(session)
        with pytest.raises(NotFound):
            OWNED_OPERATIONS[operation](session, caller, "does-not-exist")

    @pytest.mark.parametrize("operation", sorted(OWNED_OPERATIONS))
    def test_authentication_checked_first(self, session, operation) -> None:
        with pytest.raises(Unauthenticated):
            OWNED_OPERATIONS[operation](session, None, "does-not-exist")

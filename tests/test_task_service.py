"""Tests for the transactional task write path."""

from datetime import date
from unittest.mock import MagicMock

import pytest

from app.core.exceptions import ConstraintViolation, NotFoundError, ValidationError
from app.models.task import Task, TaskPriority, TaskStatus
from app.models.task_resource import TaskResource
from app.services.task import TaskService
from conftest import task_payload


def count_rows(database, model, **filters):
    with database.session() as db:
        return db.query(model).filter_by(**filters).count()


class TestCreateTask:
    def test_defaults_and_project_name(self, task_service, website):
        task = task_service.create_task(task_payload(website.id))

        assert task.project_name == "Website relaunch"
        assert task.priority == TaskPriority.MEDIUM
        assert task.status == TaskStatus.PENDING
        assert task.hours_spent == 0
        assert task.resources == []

    def test_accepts_ids_and_objects(self, task_service, website, developer, designer):
        task = task_service.create_task(
            task_payload(website.id, resources=[developer.id, {"id": designer.id, "assigned_hours": 2}])
        )

        assert [(r.id, r.assigned_hours) for r in task.resources] == [
            (developer.id, None),
            (designer.id, 2),
        ]

    def test_missing_resource_rolls_back_task(self, database, task_service, website, developer):
        with pytest.raises(ConstraintViolation):
            task_service.create_task(task_payload(website.id), [developer.id, 777])

        assert count_rows(database, Task) == 0
        assert count_rows(database, TaskResource) == 0

    def test_missing_project_is_constraint_violation(self, database, task_service):
        with pytest.raises(ConstraintViolation):
            task_service.create_task(task_payload(31337))

        assert count_rows(database, Task) == 0

    def test_equal_dates_rejected_before_storage(self):
        database = MagicMock()

        with pytest.raises(ValidationError):
            TaskService(database).create_task(
                task_payload(1, start_date=date(2024, 1, 10), end_date=date(2024, 1, 10))
            )

        database.transaction.assert_not_called()

    @pytest.mark.parametrize("field,value", [
        ("priority", "urgent"),
        ("status", "archived"),
        ("hours_spent", -2),
        ("estimated_hours", -1),
        ("title", ""),
        ("hours_spent", "inf"),
        ("estimated_hours", 1e9),
    ])
    def test_out_of_domain_values_rejected(self, field, value):
        database = MagicMock()

        with pytest.raises(ValidationError) as exc_info:
            TaskService(database).create_task(task_payload(1, **{field: value}))

        assert any(error["param"] == field for error in exc_info.value.errors)
        database.transaction.assert_not_called()


class TestUpdateTask:
    def test_full_replacement_of_resources(self, database, task_service, website, developer, designer):
        task = task_service.create_task(task_payload(website.id), [developer.id, designer.id])

        cleared = task_service.update_task(task.id, task_payload(website.id), [])
        assert cleared.resources == []
        assert count_rows(database, TaskResource, task_id=task.id) == 0

        updated = task_service.update_task(
            task.id,
            task_payload(website.id, title="Build hero section", priority="critical"),
            [designer.id],
        )
        assert updated.title == "Build hero section"
        assert updated.priority == TaskPriority.CRITICAL
        assert [r.id for r in updated.resources] == [designer.id]

    def test_failed_update_leaves_previous_state(self, task_service, website, developer):
        task = task_service.create_task(task_payload(website.id), [developer.id])

        with pytest.raises(ConstraintViolation):
            task_service.update_task(task.id, task_payload(website.id, title="Nope"), [developer.id, 555])

        current = task_service.get_task(task.id)
        assert current.title == "Build landing page"
        assert [r.id for r in current.resources] == [developer.id]

    def test_omitted_hours_spent_is_kept(self, task_service, website):
        task = task_service.create_task(task_payload(website.id, hours_spent=4))

        updated = task_service.update_task(task.id, task_payload(website.id, status="in_progress"), [])

        assert updated.hours_spent == 4
        assert updated.status == TaskStatus.IN_PROGRESS

    def test_unknown_task(self, task_service, website):
        with pytest.raises(NotFoundError):
            task_service.update_task(999, task_payload(website.id), [])


class TestTaskMetricUpdates:
    def test_zero_hours_spent_allowed(self, task_service, website):
        task = task_service.create_task(task_payload(website.id, hours_spent=3))

        assert task_service.update_hours_spent(task.id, 0).hours_spent == 0

    def test_update_hours_spent(self, task_service, website):
        task = task_service.create_task(task_payload(website.id))

        updated = task_service.update_hours_spent(task.id, 7.5)

        assert updated.hours_spent == 7.5

    @pytest.mark.parametrize("value", [-1, "abc", float("nan"), "inf", 1e9])
    def test_invalid_hours_spent(self, task_service, website, value):
        task = task_service.create_task(task_payload(website.id))

        with pytest.raises(ValidationError):
            task_service.update_hours_spent(task.id, value)

    def test_unknown_task(self, task_service):
        with pytest.raises(NotFoundError):
            task_service.update_hours_spent(404, 1)


class TestDeleteTask:
    def test_delete_removes_assignments(self, database, task_service, website, developer):
        task = task_service.create_task(task_payload(website.id), [developer.id])

        assert task_service.delete_task(task.id) is True

        assert task_service.get_task(task.id) is None
        assert count_rows(database, TaskResource) == 0

    def test_delete_unknown_task(self, task_service):
        with pytest.raises(NotFoundError):
            task_service.delete_task(404)


class TestTaskQueries:
    def test_tasks_by_project_and_resource(self, task_service, website, developer, designer):
        first = task_service.create_task(task_payload(website.id, title="First"), [developer.id])
        second = task_service.create_task(
            task_payload(website.id, title="Second", start_date=date(2024, 1, 5), end_date=date(2024, 1, 6)),
            [designer.id],
        )

        assert [t.id for t in task_service.get_project_tasks(website.id)] == [second.id, first.id]
        assert [t.id for t in task_service.get_resource_tasks(developer.id)] == [first.id]
        assert task_service.get_resource_tasks(designer.id)[0].project_name == "Website relaunch"

    def test_resource_delete_removes_assignments(self, task_service, resource_service, website, developer):
        task = task_service.create_task(task_payload(website.id), [developer.id])

        resource_service.delete_resource(developer.id)

        assert task_service.get_task(task.id).resources == []

"""Tests for the transactional project write path."""

from datetime import date
from unittest.mock import MagicMock

import pytest

from app.core.exceptions import ConstraintViolation, NotFoundError, ValidationError
from app.models.project import Project, ProjectStatus
from app.models.project_resource import ProjectResource
from app.models.task import Task
from app.models.task_resource import TaskResource
from app.services.project import ProjectService
from conftest import project_payload, task_payload


def count_rows(database, model, **filters):
    with database.session() as db:
        return db.query(model).filter_by(**filters).count()


class TestCreateProject:
    def test_create_returns_loaded_project(self, project_service, acme, developer, designer):
        project = project_service.create_project(
            project_payload(acme.id),
            [{"id": developer.id, "assigned_hours": 10}, {"id": designer.id}],
        )

        assert project.id is not None
        assert project.client_name == "Acme Corp"
        assert project.status == ProjectStatus.PENDING
        assert project.actual_cost == 0
        assert {(r.id, r.assigned_hours) for r in project.resources} == {
            (developer.id, 10),
            (designer.id, 0),
        }
        assert project.resources[0].name == "Dana Developer"
        assert project.resources[0].hourly_rate == 50

    def test_resources_inside_payload(self, project_service, acme, developer):
        payload = project_payload(acme.id, resources=[{"resource_id": developer.id, "assigned_hours": 4}])
        project = project_service.create_project(payload)

        assert [(r.id, r.assigned_hours) for r in project.resources] == [(developer.id, 4)]

    def test_missing_resource_rolls_back_project(self, database, project_service, acme, developer):
        with pytest.raises(ConstraintViolation):
            project_service.create_project(
                project_payload(acme.id),
                [{"id": developer.id, "assigned_hours": 5}, {"id": 9999}],
            )

        assert count_rows(database, Project) == 0
        assert count_rows(database, ProjectResource) == 0

    def test_missing_client_is_constraint_violation(self, database, project_service):
        with pytest.raises(ConstraintViolation):
            project_service.create_project(project_payload(4242))

        assert count_rows(database, Project) == 0

    def test_blank_budget_is_normalized_to_none(self, project_service, acme):
        project = project_service.create_project(project_payload(acme.id, budgeted_cost=""))
        assert project.budgeted_cost is None

    @pytest.mark.parametrize("end_date", [date(2024, 1, 1), date(2023, 12, 31)])
    def test_end_date_not_after_start_rejected_before_storage(self, end_date):
        database = MagicMock()
        service = ProjectService(database)

        with pytest.raises(ValidationError) as exc_info:
            service.create_project(project_payload(1, end_date=end_date))

        assert "End date must be after start date" in str(exc_info.value.errors)
        database.transaction.assert_not_called()
        database.session.assert_not_called()

    @pytest.mark.parametrize("field,value", [
        ("estimated_hours", -1),
        ("estimated_cost", -0.5),
        ("budgeted_cost", -100),
        ("actual_cost", -1),
        ("status", "archived"),
        ("name", ""),
        ("estimated_hours", "inf"),
        ("estimated_hours", float("nan")),
        ("budgeted_cost", "Infinity"),
        ("estimated_hours", 1e12),
        ("budgeted_cost", 1e15),
        ("actual_cost", 1e10),
    ])
    def test_out_of_domain_values_rejected(self, field, value):
        database = MagicMock()
        with pytest.raises(ValidationError) as exc_info:
            ProjectService(database).create_project(project_payload(1, **{field: value}))

        assert any(error["param"] == field for error in exc_info.value.errors)
        database.transaction.assert_not_called()

    def test_missing_required_fields_rejected(self):
        database = MagicMock()
        with pytest.raises(ValidationError) as exc_info:
            ProjectService(database).create_project({"name": "No dates"})

        params = {error["param"] for error in exc_info.value.errors}
        assert {"client_id", "start_date", "end_date", "estimated_hours"} <= params

    def test_duplicate_resource_rejected(self, project_service, acme, developer):
        with pytest.raises(ValidationError):
            project_service.create_project(project_payload(acme.id), [developer.id, developer.id])

    @pytest.mark.parametrize("hours", ["inf", -1, 1e9])
    def test_assigned_hours_outside_column_range_rejected(self, project_service, acme, developer, hours):
        with pytest.raises(ValidationError):
            project_service.create_project(project_payload(acme.id), [{"id": developer.id, "assigned_hours": hours}])


class TestUpdateProject:
    def test_empty_list_removes_every_assignment(self, database, project_service, acme, developer, designer):
        project = project_service.create_project(project_payload(acme.id), [developer.id, designer.id])

        updated = project_service.update_project(project.id, project_payload(acme.id), [])

        assert updated.resources == []
        assert count_rows(database, ProjectResource, project_id=project.id) == 0

    def test_new_list_is_the_complete_membership(self, database, project_service, acme, developer, designer):
        project = project_service.create_project(
            project_payload(acme.id), [{"id": developer.id, "assigned_hours": 8}]
        )
        project_service.update_project(project.id, project_payload(acme.id), [])

        updated = project_service.update_project(
            project.id,
            project_payload(acme.id, name="Relaunch v2"),
            [{"id": designer.id, "assigned_hours": 3}],
        )

        assert updated.name == "Relaunch v2"
        assert [(r.id, r.assigned_hours) for r in updated.resources] == [(designer.id, 3)]
        assert count_rows(database, ProjectResource, project_id=project.id) == 1

    def test_failed_update_leaves_previous_state(self, project_service, acme, developer):
        project = project_service.create_project(
            project_payload(acme.id), [{"id": developer.id, "assigned_hours": 8}]
        )

        with pytest.raises(ConstraintViolation):
            project_service.update_project(
                project.id,
                project_payload(acme.id, name="Should not stick"),
                [{"id": 9999, "assigned_hours": 1}],
            )

        current = project_service.get_project(project.id)
        assert current.name == "Website relaunch"
        assert [(r.id, r.assigned_hours) for r in current.resources] == [(developer.id, 8)]

    def test_omitted_optional_fields_are_kept(self, project_service, acme):
        project = project_service.create_project(project_payload(acme.id, budgeted_cost=1500))
        project_service.update_actual_cost(project.id, 300)

        payload = project_payload(acme.id, status="in_progress")
        del payload["budgeted_cost"]
        updated = project_service.update_project(project.id, payload, [])

        assert updated.status == ProjectStatus.IN_PROGRESS
        assert updated.budgeted_cost == 1500
        assert updated.actual_cost == 300

    def test_explicit_null_clears_budget(self, project_service, website, acme):
        updated = project_service.update_project(website.id, project_payload(acme.id, budgeted_cost=None), [])
        assert updated.budgeted_cost is None

    def test_unknown_project(self, project_service, acme):
        with pytest.raises(NotFoundError):
            project_service.update_project(12345, project_payload(acme.id), [])


class TestProjectMetricUpdates:
    def test_update_actual_cost(self, project_service, website):
        updated = project_service.update_actual_cost(website.id, 1200)
        assert updated.actual_cost == 1200
        assert updated.name == website.name

    def test_negative_actual_cost_rejected(self, project_service, website):
        with pytest.raises(ValidationError) as exc_info:
            project_service.update_actual_cost(website.id, -5)

        assert exc_info.value.errors == [{"param": "actual_cost", "msg": "actual_cost must be a non-negative number"}]

        assert project_service.get_project(website.id).actual_cost == 0

    @pytest.mark.parametrize("value", ["inf", float("nan"), 1e12])
    def test_actual_cost_outside_column_range_rejected(self, project_service, website, value):
        with pytest.raises(ValidationError) as exc_info:
            project_service.update_actual_cost(website.id, value)

        assert exc_info.value.errors[0]["param"] == "actual_cost"
        assert project_service.get_project(website.id).actual_cost == 0

    def test_actual_cost_unknown_project(self, project_service):
        with pytest.raises(NotFoundError):
            project_service.update_actual_cost(999, 10)


class TestDeleteProject:
    def test_delete_removes_children(self, database, project_service, task_service, acme, developer):
        project = project_service.create_project(project_payload(acme.id), [developer.id])
        task_service.create_task(task_payload(project.id), [developer.id])

        assert project_service.delete_project(project.id) is True

        assert project_service.get_project(project.id) is None
        assert count_rows(database, ProjectResource) == 0
        assert count_rows(database, Task) == 0
        assert count_rows(database, TaskResource) == 0

    def test_delete_unknown_project(self, project_service):
        with pytest.raises(NotFoundError):
            project_service.delete_project(404)


class TestProjectQueries:
    def test_projects_ordered_by_start_date(self, project_service, acme):
        later = project_service.create_project(
            project_payload(acme.id, name="Later", start_date=date(2024, 6, 1), end_date=date(2024, 7, 1))
        )
        earlier = project_service.create_project(project_payload(acme.id, name="Earlier"))

        assert [p.id for p in project_service.get_projects()] == [earlier.id, later.id]

    def test_filter_by_client_and_status(self, project_service, client_service, acme):
        other = client_service.create_client({"name": "Globex"})
        mine = project_service.create_project(project_payload(acme.id, status="on_hold"))
        project_service.create_project(project_payload(other.id))

        assert [p.id for p in project_service.get_client_projects(acme.id)] == [mine.id]
        assert [p.id for p in project_service.get_projects(status=ProjectStatus.ON_HOLD)] == [mine.id]

    def test_details_include_actual_hours(self, project_service, task_service, website):
        task_service.create_task(task_payload(website.id, hours_spent=6))

        details = project_service.get_project_with_details(website.id)
        assert details.actual_hours == 6

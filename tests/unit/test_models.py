"""
Unit tests for Project Pulse data models.
"""

from datetime import date

import pytest
from pydantic import ValidationError

from project_pulse.models.core import DependencyType, ProjectData, Task, TaskStatus
from project_pulse.models.messaging import AgentMessage, MessageType


class TestTask:
    """Test cases for Task model."""

    def test_camel_case_aliases(self):
        task = Task.model_validate({
            "id": "t1", "title": "Build", "teamId": "web", "assigneeId": "u1",
            "estimatedHours": 16, "startDate": "2024-01-01", "endDate": "2024-01-05",
        })

        assert task.team_id == "web"
        assert task.assignee_id == "u1"
        assert task.start_date == date(2024, 1, 1)
        assert task.duration_days() == 4

    def test_undated_duration_uses_effort(self):
        assert Task(id="t1", title="A", estimated_hours=24).duration_days() == 3
        assert Task(id="t1", title="A", estimated_hours=24).duration_days(hours_per_day=6) == 4
        assert Task(id="t1", title="A").duration_days() == 1

    def test_remaining_hours(self):
        assert Task(id="t1", title="A", estimated_hours=40, progress=25).remaining_hours == 30
        assert Task(id="t1", title="A", estimated_hours=40, status="completed").remaining_hours == 0

    def test_progress_bounds(self):
        with pytest.raises(ValidationError):
            Task(id="t1", title="A", progress=120)

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            Task(id="t1", title="A", status="paused")

    def test_tasks_are_immutable(self):
        task = Task(id="t1", title="A")
        with pytest.raises(ValidationError):
            task.title = "B"


class TestProjectData:
    """Test cases for ProjectData."""

    def test_sample_project(self, sample_project):
        assert sample_project.project.id == 1
        assert sample_project.get_task_by_id("task-2").status == TaskStatus.IN_PROGRESS
        assert sample_project.get_task_by_id("missing") is None
        assert sample_project.dependencies[0].type == DependencyType.FINISH_TO_START
        assert [task.id for task in sample_project.tasks_for_team("qa")] == ["task-4"]
        assert [resource.id for resource in sample_project.resources_for_team("backend")] == ["user-2"]
        assert len(sample_project.skill_requirements) == 8

    def test_minimal_project(self):
        project = ProjectData.model_validate({"project": {"id": "p", "name": "Minimal"}})

        assert project.tasks == []
        assert project.teams == []

    def test_project_is_required(self):
        with pytest.raises(ValidationError):
            ProjectData.model_validate({"tasks": []})


class TestAgentMessage:

    def test_empty_ids_rejected(self):
        with pytest.raises(ValidationError):
            AgentMessage(id="", sender="a", recipient="b", type=MessageType.STATUS_UPDATE)

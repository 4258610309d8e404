"""
Built-in sample project used by the CLI and the tests.

Keys are in camelCase, the shape project exports arrive in.
"""

from typing import Any, Dict, Union

SAMPLE_TASKS = [
    {
        "id": "task-1",
        "title": "Design System Setup",
        "description": "Create comprehensive design system and component library",
        "status": "completed",
        "priority": "high",
        "assignee": "Sarah Chen",
        "assigneeId": "user-1",
        "teamId": "design",
        "startDate": "2024-01-01",
        "endDate": "2024-01-15",
        "progress": 100,
        "dependencies": [],
        "estimatedHours": 80,
        "actualHours": 75,
    },
    {
        "id": "task-2",
        "title": "API Development",
        "description": "Build RESTful API endpoints and database integration",
        "status": "in-progress",
        "priority": "high",
        "assignee": "Mike Johnson",
        "assigneeId": "user-2",
        "teamId": "backend",
        "startDate": "2024-01-10",
        "endDate": "2024-01-20",
        "progress": 65,
        "dependencies": ["task-1"],
        "estimatedHours": 120,
        "actualHours": 95,
    },
    {
        "id": "task-3",
        "title": "Frontend Implementation",
        "description": "Implement user interface using React and design system",
        "status": "pending",
        "priority": "medium",
        "assignee": "Alex Rivera",
        "assigneeId": "user-3",
        "teamId": "frontend",
        "startDate": "2024-01-18",
        "endDate": "2024-01-25",
        "progress": 0,
        "dependencies": ["task-1", "task-2"],
        "estimatedHours": 100,
        "actualHours": 0,
    },
    {
        "id": "task-4",
        "title": "Testing & QA",
        "description": "Comprehensive testing including unit, integration, and E2E tests",
        "status": "pending",
        "priority": "high",
        "assignee": "Emma Davis",
        "assigneeId": "user-4",
        "teamId": "qa",
        "startDate": "2024-01-23",
        "endDate": "2024-01-30",
        "progress": 0,
        "dependencies": ["task-3"],
        "estimatedHours": 60,
        "actualHours": 0,
    },
]

SAMPLE_TEAMS = [
    {"id": "design", "name": "Design Team", "workloadUtilization": 75, "taskIds": ["task-1"]},
    {"id": "backend", "name": "Backend Team", "workloadUtilization": 95, "taskIds": ["task-2"]},
    {"id": "frontend", "name": "Frontend Team", "workloadUtilization": 60, "taskIds": ["task-3"]},
    {"id": "qa", "name": "QA Team", "workloadUtilization": 40, "taskIds": ["task-4"]},
]

SAMPLE_RESOURCES = [
    {
        "id": "user-1",
        "name": "Sarah Chen",
        "teamId": "design",
        "skills": ["UI/UX Design", "Figma", "Design Systems"],
        "capacity": 40,
        "availability": "available",
    },
    {
        "id": "user-2",
        "name": "Mike Johnson",
        "teamId": "backend",
        "skills": ["Node.js", "Python", "Database Design", "API Development"],
        "capacity": 40,
        "availability": "busy",
    },
    {
        "id": "user-3",
        "name": "Alex Rivera",
        "teamId": "frontend",
        "skills": ["React", "TypeScript", "CSS", "JavaScript"],
        "capacity": 40,
        "availability": "available",
    },
    {
        "id": "user-4",
        "name": "Emma Davis",
        "teamId": "qa",
        "skills": ["Test Automation", "Manual Testing", "Cypress", "Jest"],
        "capacity": 40,
        "availability": "available",
    },
]

SAMPLE_DEPENDENCIES = [
    {"id": "dep-1", "fromTask": "task-1", "toTask": "task-2", "type": "finish-to-start", "lag": 0},
    {"id": "dep-2", "fromTask": "task-1", "toTask": "task-3", "type": "finish-to-start", "lag": 0},
    {"id": "dep-3", "fromTask": "task-2", "toTask": "task-3", "type": "finish-to-start", "lag": 0},
    {"id": "dep-4", "fromTask": "task-3", "toTask": "task-4", "type": "finish-to-start", "lag": 0},
]

SAMPLE_SKILL_REQUIREMENTS = [
    {"taskId": "task-1", "skill": "UI/UX Design"},
    {"taskId": "task-1", "skill": "Design Systems"},
    {"taskId": "task-2", "skill": "API Development"},
    {"taskId": "task-2", "skill": "Database Design"},
    {"taskId": "task-3", "skill": "React"},
    {"taskId": "task-3", "skill": "TypeScript"},
    {"taskId": "task-4", "skill": "Test Automation"},
    {"taskId": "task-4", "skill": "Manual Testing"},
]


def sample_project_data(project_id: Union[int, str] = 1) -> Dict[str, Any]:
    """Return a fresh copy of the sample project snapshot."""
    return {
        "project": {
            "id": project_id,
            "name": "Sample Project",
            "description": "Sample project for AI analysis",
            "endDate": "2024-02-15",
        },
        "tasks": [dict(task, dependencies=list(task["dependencies"])) for task in SAMPLE_TASKS],
        "teams": [dict(team) for team in SAMPLE_TEAMS],
        "dependencies": [dict(dependency) for dependency in SAMPLE_DEPENDENCIES],
        "resources": [dict(resource, skills=list(resource["skills"])) for resource in SAMPLE_RESOURCES],
        "skillRequirements": [dict(requirement) for requirement in SAMPLE_SKILL_REQUIREMENTS],
    }

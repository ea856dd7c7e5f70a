"""Goals domain event catalog."""

from __future__ import annotations

GOAL_CREATED = "goals.goal.created"
GOAL_UPDATED = "goals.goal.updated"
GOAL_DELETED = "goals.goal.deleted"
GOAL_COMPLETED = "goals.goal.completed"
GOAL_ACTIVITY_LOGGED = "goals.activity.logged"
GOAL_ACTIVITY_UPDATED = "goals.activity.updated"
GOAL_ACTIVITY_DELETED = "goals.activity.deleted"

EVENT_CATALOG = {
    GOAL_CREATED: {
        "version": "v1",
        "payload": {"goal_id": "int", "user_id": "int", "type": "str", "parent_goal_id": "int?"},
    },
    GOAL_UPDATED: {
        "version": "v1",
        "payload": {"goal_id": "int", "user_id": "int", "fields": "list[str]"},
    },
    GOAL_DELETED: {"version": "v1", "payload": {"goal_id": "int", "user_id": "int"}},
    GOAL_COMPLETED: {
        "version": "v1",
        "payload": {"goal_id": "int", "user_id": "int", "completed_date": "datetime"},
    },
    GOAL_ACTIVITY_LOGGED: {
        "version": "v1",
        "payload": {
            "activity_id": "int",
            "goal_id": "int",
            "user_id": "int",
            "minutes_spent": "int",
            "progress_increment": "float",
            "time_spent": "int",
            "progress": "float",
        },
    },
    GOAL_ACTIVITY_UPDATED: {
        "version": "v1",
        "payload": {"activity_id": "int", "goal_id": "int", "user_id": "int"},
    },
    GOAL_ACTIVITY_DELETED: {
        "version": "v1",
        "payload": {"activity_id": "int", "goal_id": "int", "user_id": "int"},
    },
}

__all__ = [
    "EVENT_CATALOG",
    "GOAL_CREATED",
    "GOAL_UPDATED",
    "GOAL_DELETED",
    "GOAL_COMPLETED",
    "GOAL_ACTIVITY_LOGGED",
    "GOAL_ACTIVITY_UPDATED",
    "GOAL_ACTIVITY_DELETED",
]

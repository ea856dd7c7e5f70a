from reflectai.domains.goals.models.goal_models import (
    GOAL_STATUSES,
    GOAL_TYPES,
    Goal,
    GoalActivity,
)

__all__ = ["Goal", "GoalActivity", "GOAL_TYPES", "GOAL_STATUSES"]

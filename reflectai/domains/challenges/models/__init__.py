from reflectai.domains.challenges.models.challenge_models import (
    CHALLENGE_STATUSES,
    CHALLENGE_TYPES,
    Challenge,
    UserBadge,
    UserChallenge,
)

__all__ = ["Challenge", "UserChallenge", "UserBadge", "CHALLENGE_TYPES", "CHALLENGE_STATUSES"]

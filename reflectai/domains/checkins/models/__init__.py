from reflectai.domains.checkins.models.checkin_models import CHECKIN_TYPES, PRIORITIES, CheckIn

__all__ = ["CheckIn", "CHECKIN_TYPES", "PRIORITIES"]

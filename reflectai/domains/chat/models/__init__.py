from reflectai.domains.chat.models.chat_usage import ChatUsage

__all__ = ["ChatUsage"]

from reflectai.domains.journal.models.journal_entry import JournalEntry
from reflectai.domains.journal.models.journal_stats import JournalStats

__all__ = ["JournalEntry", "JournalStats"]

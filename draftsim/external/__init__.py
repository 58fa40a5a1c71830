from .record_loader import load_draft_record, load_draft_records
from .sleeper_client import SleeperClient, SleeperAPIError, SleeperRateLimitError

__all__ = [
    "load_draft_record",
    "load_draft_records",
    "SleeperClient",
    "SleeperAPIError",
    "SleeperRateLimitError",
]

from strikeguard.spam.activity_store import ActivityStore
from strikeguard.spam.spam_detector import SpamDetector

__all__ = ["ActivityStore", "SpamDetector"]

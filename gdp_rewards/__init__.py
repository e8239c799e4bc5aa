"""GDP multi-generation referral reward engine."""

__version__ = "1.0.0"

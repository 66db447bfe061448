"""GuardianNet: local block lists and AI-assisted content moderation."""

__version__ = "0.1.0"

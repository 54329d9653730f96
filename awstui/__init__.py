"""aws-tui: browse AWS resources with a profile-scoped TTL cache."""

__version__ = "0.1.0"

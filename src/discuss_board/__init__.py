"""Discussion board API: accounts, content, moderation, appeals and audit logs."""

__version__ = "0.1.0"

"""Background job modules for RQ workers and schedulers."""

from .maintenance import purge_expired_announcements_job

__all__ = ["purge_expired_announcements_job"]

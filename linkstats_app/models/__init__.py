"""
SQLAlchemy table models for the relational storage backend.

``urls`` holds the transactional link records; ``url_clicks`` is the
append-only click event log, keyed by (short_code, timestamp) like the
managed document store it mirrors.
"""

from .url import URL
from .click import Click

__all__ = ["URL", "Click"]

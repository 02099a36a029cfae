from sqlalchemy import Column, Index, Integer, String
from linkstats_app.database.connection import Base


class Click(Base):
    """
    One click event.

    The timestamp is kept as an ISO-8601 string (``...T10:05:00.000Z``) so
    that BETWEEN range queries compare exactly like the string sort key of
    the document store backend.
    """
    __tablename__ = "url_clicks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    short_code = Column(String(20), nullable=False)
    timestamp = Column(String(30), nullable=False)
    user_agent = Column(String, default="")
    browser = Column(String(50), default="")
    browser_version = Column(String(20), default="")
    os = Column(String(50), default="")
    device_type = Column(String(20), default="")
    referrer = Column(String, default="")
    referrer_domain = Column(String, default="")
    country = Column(String(20), default="")
    region = Column(String(100), default="")
    city = Column(String(100), default="")

    __table_args__ = (
        Index("ix_url_clicks_short_code_timestamp", "short_code", "timestamp"),
    )

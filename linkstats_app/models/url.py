from sqlalchemy import Column, Integer, String, DateTime
from linkstats_app.database.connection import Base


class URL(Base):
    """
    Short link record.

    ``click_count`` is only changed through an UPDATE expression
    (``click_count = click_count + 1``) so concurrent redirects never lose
    increments.
    """
    __tablename__ = "urls"

    # Note: primary_key implies a unique index (short codes are the lookup key)
    short_code = Column(String(20), primary_key=True)
    original_url = Column(String, nullable=False)
    click_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)

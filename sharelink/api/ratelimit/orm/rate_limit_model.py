"""Upload rate-limit counter ORM model."""

from sqlalchemy import Column, Date, Integer, String

from sharelink.database import Base


class RateLimitModel(Base):
    __tablename__ = "upload_rate_limits"

    origin_id = Column(String(64), primary_key=True)
    upload_count = Column(Integer, nullable=False, default=0)
    last_upload_date = Column(Date, nullable=False)

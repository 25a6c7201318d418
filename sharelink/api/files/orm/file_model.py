"""File ORM model."""

from sqlalchemy import BigInteger, Boolean, Column, DateTime, Integer, String

from sharelink.database import Base


class FileModel(Base):
    __tablename__ = "files"

    id = Column(String(32), primary_key=True)
    original_filename = Column(String(255), nullable=False)
    object_key = Column(String(512), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=True)
    file_size = Column(BigInteger, nullable=False, default=0)
    content_type = Column(String(255), nullable=False)
    download_count = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    uploader_ip = Column(String(64), nullable=False, default="unknown")
    created_at = Column(DateTime(timezone=True), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)

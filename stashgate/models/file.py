from sqlalchemy import JSON, Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship

from stashgate.core.database import Base
from stashgate.utils.clock import utcnow


class File(Base):
    __tablename__ = "files"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False, index=True)
    custom_name = Column(Text, nullable=True)
    # "{tenantId}/..." -- the prefix is what scopes a file to its tenant
    key = Column(String, unique=True, index=True, nullable=False)
    path = Column(Text, nullable=True)
    mime = Column(String, nullable=False)
    size = Column(Integer, nullable=False)
    # "metadata" is reserved on declarative classes
    file_metadata = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    share_links = relationship(
        "ShareLink",
        back_populates="file",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

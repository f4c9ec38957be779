import enum

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship, validates

from stashgate.core.database import Base
from stashgate.utils.clock import utcnow


class ShareLinkState(str, enum.Enum):
    ACTIVE = "active"
    REVOKED = "revoked"


class ShareLink(Base):
    __tablename__ = "share_links"

    id = Column(Integer, primary_key=True, autoincrement=True)
    token = Column(String(128), unique=True, index=True, nullable=False)
    file_id = Column(Integer, ForeignKey("files.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False)
    # bcrypt hash, never the plaintext
    password = Column(Text, nullable=True)
    access_count = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow)

    file = relationship("File", back_populates="share_links")

    @validates("is_active")
    def _validate_is_active(self, key, value):
        if value and self.is_active is False:
            raise ValueError("A revoked share link cannot be re-activated")
        return value

    @property
    def state(self) -> ShareLinkState:
        return ShareLinkState.ACTIVE if self.is_active is not False else ShareLinkState.REVOKED

    @property
    def has_password(self) -> bool:
        return self.password is not None

    def revoke(self) -> None:
        self.is_active = False

    def is_expired(self, now) -> bool:
        return now >= self.expires_at

    def is_usable(self, now) -> bool:
        return self.state is ShareLinkState.ACTIVE and not self.is_expired(now)

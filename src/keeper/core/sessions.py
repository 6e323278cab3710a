#-------------------------------------------------------------------------bh-
# Common Imports:
from ..base import *
#-------------------------------------------------------------------------eh-

from typing import Optional


#-------------------------------------------------------------------------bm-
#----------------------------------------------------------------------------
class LoginSession(Base):
    """An opaque session token issued to a user at login."""
    __tablename__ = 'login_sessions'

    __table_args__ = (
        Index('ix_login_sessions_user_id', 'user_id'),
    )

    token = Column(String(64), primary_key=True)
    user_id = Column(Integer, ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False)
    creation_time = Column(DateTime, nullable=False, default=datetime.now)

    user = relationship('User', back_populates='login_sessions')

    def is_expired(self, max_age: Optional[int] = None, now: Optional[datetime] = None) -> bool:
        """Check whether this session is older than max_age seconds (never, if max_age is None)."""
        if max_age is None:
            return False
        if now is None:
            now = datetime.now()
        return (now - self.creation_time).total_seconds() > max_age

    def __repr__(self):
        # never print the token
        return f"<LoginSession(user_id={self.user_id}, created={self.creation_time})>"

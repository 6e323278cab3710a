#-------------------------------------------------------------------------bh-
# Common Imports:
from ..base import *
#-------------------------------------------------------------------------eh-

from typing import Optional
from sqlalchemy.orm import Session


#-------------------------------------------------------------------------bm-
#----------------------------------------------------------------------------
class User(Base, TimestampMixin):
    """
    Represents an account that can log in and keep a secret.

    Local accounts carry protected credential material; accounts created by
    federated login carry a provider subject id and no credential.
    """
    __tablename__ = 'users'

    def __eq__(self, other):
        """Two users are equal if they have the same user_id."""
        if not isinstance(other, User):
            return False
        return self.user_id is not None and self.user_id == other.user_id

    def __hash__(self):
        """Hash based on user_id for set/dict operations."""
        return hash(self.user_id) if self.user_id is not None else hash(id(self))

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True)

    # Fernet token or salted hash, depending on the deployment's scheme
    credential = Column(Text)

    federated_id = Column(String(255), unique=True, nullable=True)
    secret_text = Column(Text)

    login_sessions = relationship('LoginSession', back_populates='user', cascade='all, delete-orphan')

    # ============================================================================
    # Class Methods - User Lookup
    # ============================================================================

    @classmethod
    def get_by_username(cls, session: Session, username: str) -> Optional['User']:
        """Return the user with this identifier, or None."""
        return session.query(cls).filter(cls.username == username).first()

    @classmethod
    def get_by_federated_id(cls, session: Session, federated_id: str) -> Optional['User']:
        """Return the user linked to this provider subject id, or None."""
        return session.query(cls).filter(cls.federated_id == federated_id).first()

    # ============================================================================
    # Properties
    # ============================================================================

    @property
    def is_federated(self) -> bool:
        return self.federated_id is not None

    @property
    def has_local_credential(self) -> bool:
        return bool(self.credential)

    @property
    def has_secret(self) -> bool:
        return self.secret_text is not None

    def __repr__(self):
        return f"<User(id={self.user_id}, username='{self.username}')>"

from .users import User
from .sessions import LoginSession

__all__ = ['User', 'LoginSession']

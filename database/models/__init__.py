from .base import Base, JSONType
from .profile import Profile
from .connection import Connection
from .match import Match
from .session import UserSession

__all__ = [
    'Base',
    'JSONType',
    'Profile',
    'Connection',
    'Match',
    'UserSession',
]

from database.repositories.base import BaseRepository
from database.repositories.profile import ProfileRepository
from database.repositories.connection import ConnectionRepository
from database.repositories.match import MatchRepository
from database.repositories.session import SessionRepository

__all__ = [
    'BaseRepository',
    'ProfileRepository',
    'ConnectionRepository',
    'MatchRepository',
    'SessionRepository',
]

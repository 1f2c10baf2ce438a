"""
MongoDB Repository Interfaces Package
"""

from .trip_repository_interface import TripRepositoryInterface
from .user_repository_interface import UserRepositoryInterface

__all__ = [
    'TripRepositoryInterface',
    'UserRepositoryInterface',
]

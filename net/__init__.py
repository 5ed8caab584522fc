"""
Networking - room relay server and the threaded relay client
"""

from .relay import RoomRelay, Room
from .client import RelayClient

__all__ = ['RoomRelay', 'Room', 'RelayClient']

from .user_manager import UserManager
from .artist_manager import ArtistManager
from .event_manager import EventManager, EventState, event_state

__all__ = [
    "UserManager",
    "ArtistManager",
    "EventManager",
    "EventState",
    "event_state",
]

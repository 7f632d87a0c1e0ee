"""
Business entities representing core domain concepts.

Entities are pydantic models validated on every load and save of
their storage document.

Exports:
- Category: Display category of the catalog
- Movie: Movie with its stream and poster URLs
- Series / Season / Episode: Series document with nested seasons
- Subtitle: Subtitle track
- User / Role: Account and its role
- HistoryEntry / StreamType: Watch history entry
"""

from src.core.entities.catalog import Category, Episode, Movie, Season, Series, Subtitle
from src.core.entities.users import HistoryEntry, Role, StreamType, User

__all__ = [
    "Category",
    "Episode",
    "Movie",
    "Season",
    "Series",
    "Subtitle",
    "HistoryEntry",
    "Role",
    "StreamType",
    "User",
]

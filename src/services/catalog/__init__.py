"""
Services du catalogue : categories, films, series et moteur de merge.
"""

from .category_service import CategoryService
from .merge import merge_seasons, merge_series, upsert_episode
from .movie_service import MovieService
from .series_service import SeriesService

__all__ = [
    "CategoryService",
    "MovieService",
    "SeriesService",
    "merge_seasons",
    "merge_series",
    "upsert_episode",
]

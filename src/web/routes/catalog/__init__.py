"""
Package routes catalogue : categories, films et series.
"""

from fastapi import APIRouter

from . import categories, movies, series

router = APIRouter(prefix="/api/catalog")

router.include_router(categories.router)
router.include_router(movies.router)
router.include_router(series.router)

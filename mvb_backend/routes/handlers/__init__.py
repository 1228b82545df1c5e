"""
Route handlers.
"""
from .movies import register_movie_routes
from .stream import register_stream_routes

__all__ = [
    "register_movie_routes",
    "register_stream_routes",
]

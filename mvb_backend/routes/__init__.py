"""
HTTP routes for the Movie Browser backend.
Importing this package is side-effect free; route registration is explicit.
"""
from .registry import API_PREFIX, register_all_routes, register_routes

__all__ = [
    "API_PREFIX",
    "register_all_routes",
    "register_routes",
]

"""Metadata catalog adapters."""
from .omdb import OmdbClient

__all__ = ["OmdbClient"]

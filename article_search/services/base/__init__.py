"""
Base module for search services.
Contains common infrastructure and base classes.
"""

from .service_base import BaseService

__all__ = [
    'BaseService'
]

"""
Infrastructure layer - external system integrations.
"""

from .redis_client import create_redis

__all__ = ['create_redis']

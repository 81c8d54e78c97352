"""
Middleware package for the Agent Demo API.
"""

from agent_demo.middleware.cache_control import CacheControlMiddleware

__all__ = ["CacheControlMiddleware"]

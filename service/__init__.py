# ABOUTME: HTTP service package wrapping the response cache with configuration and a simulated generator
# ABOUTME: Exposes the aiohttp application factory, runtime settings and the stand-in answer generator

from .app import create_app
from .config import CacheSettings
from .generator import SimulatedGenerator

__all__ = [
    "create_app",
    "CacheSettings",
    "SimulatedGenerator",
]

"""
Health module - liveness endpoint.
"""

from .controllers import HealthController

__all__ = ["HealthController"]

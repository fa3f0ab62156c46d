"""
PatternSight Services

Service layer wrapping the technical-analysis engine.
Each service has a defined interface (contract) and implementation.
"""

from patternsight.services.base import BaseService

__all__ = ["BaseService"]

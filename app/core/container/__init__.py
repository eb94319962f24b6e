# ============================================================================
# SCOPE: GLOBAL
# Description: Dependency injection containers.
# ============================================================================
"""
Dependency Injection Container.

Wires concrete adapters to the ports each domain consumes.
"""

from .reception import ReceptionContainer

__all__ = ["ReceptionContainer"]

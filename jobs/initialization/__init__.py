"""
Process initialization:
- logging: Logger configuration
- shutdown: Graceful shutdown handler
"""

__all__ = []

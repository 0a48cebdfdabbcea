"""Shared dependencies for API routes."""

from typing import Optional
from fastapi import HTTPException
from registry import OperationRegistry

# Global registry instance
_registry: Optional[OperationRegistry] = None


def set_registry(registry: Optional[OperationRegistry]) -> None:
    """Set the global registry instance."""
    global _registry
    _registry = registry


def get_registry() -> OperationRegistry:
    """Get the registry instance dependency."""
    if _registry is None:
        raise HTTPException(status_code=503, detail="Tracker not initialized")
    return _registry

"""Typed failures raised by the projection library."""

from __future__ import annotations


class ProjectionError(Exception):
    """Base class for every error this library raises on purpose."""


class ConfigNotFound(ProjectionError, LookupError):
    """Raised when a region has no regional configuration."""

    def __init__(self, region: str):
        self.region = region
        super().__init__(f"Regional configuration not found for: {region!r}")


class InvalidInput(ProjectionError, ValueError):
    """Raised when call arguments or the asset list cannot be projected."""


class ProjectionCancelled(ProjectionError):
    """Raised when a caller cancels a running Monte Carlo simulation."""

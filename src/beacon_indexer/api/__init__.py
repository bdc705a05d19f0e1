"""
API server module for the participation rate and node status endpoints.

Provides HTTP endpoints for:
- /network/participation_rate - Participation rate as plain text
- /network/participation - Participation rate with its status as JSON
- /health - Health check endpoint
- /metrics - Prometheus metrics endpoint
"""

from .server import ApiServer, ApiServerConfig

__all__ = [
    "ApiServer",
    "ApiServerConfig",
]

"""
In-process stand-in for the auth service and the rate-limited gateway.
"""

from .server import MockGatewayServer, create_app

__all__ = ["MockGatewayServer", "create_app"]

"""
Adapters package for the harness.

Contains HTTP client wrappers for the two external collaborators (the auth
service and the gateway under test). These adapters encapsulate:

- Base URLs and request shapes
- Response decoding and classification
- Error handling that maps to shared errors

Nothing here retries: a retry would put a second request into the window
being measured.
"""

from .auth_client import AuthClient
from .gateway_client import GatewayClient

__all__ = [
    "AuthClient",
    "GatewayClient",
]

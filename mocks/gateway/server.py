"""
Mock gateway server providing login and fixed-window rate-limited routes.

Behaves like the gateway stack the harness targets:
- ``POST /auth/login`` mints a fresh token per login, so two logins of the
  same user are two independent identities.
- ``GET /api/v1/users`` and ``GET /api/v1/orders`` require a bearer token
  and count requests per (token, route, window). Requests over the route
  quota in the current window get 429.
"""

import time
import uuid
from typing import Callable, Dict, List, Optional, Tuple

from fastapi import FastAPI, Header, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from shared.logging import get_logger

DEFAULT_ROUTE_LIMITS = {
    "/api/v1/users": 5,
    "/api/v1/orders": 5,
}

DEFAULT_USERS = {
    "user_all": "123",
    "user_b": "123",
}


class LoginRequest(BaseModel):
    username: str
    password: str


def _wall_clock_ms() -> int:
    return time.time_ns() // 1_000_000


class MockGatewayServer:
    """Mock gateway implementation."""

    def __init__(
        self,
        route_limits: Optional[Dict[str, int]] = None,
        users: Optional[Dict[str, str]] = None,
        window_ms: int = 1000,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.logger = get_logger("mock.gateway")
        self.app = FastAPI(title="Mock Gateway", version="1.0.0")

        self.route_limits = dict(DEFAULT_ROUTE_LIMITS if route_limits is None else route_limits)
        self.users = dict(DEFAULT_USERS if users is None else users)
        self.window_ms = window_ms
        self.clock = clock or _wall_clock_ms

        # token -> username
        self.tokens: Dict[str, str] = {}
        # (token, route, window index) -> request count
        self.counters: Dict[Tuple[str, str, int], int] = {}
        # (token, route, status) per gateway request, in arrival order
        self.request_log: List[Tuple[str, str, int]] = []

        self._setup_routes()

    def _setup_routes(self):
        """Set up mock gateway routes."""

        @self.app.middleware("http")
        async def request_id(request: Request, call_next):
            response = await call_next(request)
            response.headers["X-Request-Id"] = request.headers.get("X-Request-Id") or str(uuid.uuid4())
            return response

        @self.app.post("/auth/login")
        async def login(body: LoginRequest):
            """Issue a new token for valid credentials."""
            if self.users.get(body.username) != body.password:
                return JSONResponse(status_code=401, content={"error": "invalid credentials"})

            token = str(uuid.uuid4())
            self.tokens[token] = body.username
            self.logger.info("Token issued", username=body.username)
            return {"token": token}

        @self.app.get("/api/v1/{resource}")
        async def resource(resource: str, request: Request, authorization: Optional[str] = Header(None)):
            """Rate-limited protected resource."""
            route = request.url.path
            if route not in self.route_limits:
                return JSONResponse(status_code=404, content={"error": "route not found"})

            token = self._bearer_token(authorization)
            if token is None:
                return JSONResponse(status_code=401, content={"error": "unauthorized"})

            if not self._allow(token, route):
                self.request_log.append((token, route, 429))
                return JSONResponse(status_code=429, content={"error": "rate limit exceeded"})

            self.request_log.append((token, route, 200))
            return {"resource": resource, "items": []}

    def _bearer_token(self, authorization: Optional[str]) -> Optional[str]:
        if not authorization or not authorization.startswith("Bearer "):
            return None
        token = authorization[len("Bearer "):]
        return token if token in self.tokens else None

    def _allow(self, token: str, route: str) -> bool:
        """Count the request in the current window and compare with the route quota."""
        window = self.clock() // self.window_ms
        # Counters older than the previous window can no longer matter
        for key in [k for k in self.counters if k[2] < window - 1]:
            del self.counters[key]

        key = (token, route, window)
        self.counters[key] = self.counters.get(key, 0) + 1
        return self.counters[key] <= self.route_limits[route]

    def statuses(self, token: str, route: str) -> List[int]:
        """Statuses returned to ``token`` on ``route``, in order."""
        return [status for t, r, status in self.request_log if t == token and r == route]


def create_app():
    """Create mock gateway application."""
    server = MockGatewayServer()
    return server.app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(create_app(), host="0.0.0.0", port=8085)

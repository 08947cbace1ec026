"""Fixed-window, per-client request rate limiting for the `/api` surface."""

import time
from collections.abc import Callable
from dataclasses import dataclass
from threading import Lock

from fastapi.responses import JSONResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from storefront.config import get_settings
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class Window:
    started_at: float
    count: int = 0


class FixedWindowRateLimiter:
    """Count hits per key inside windows of `window_seconds`.

    A window opens on the first hit of a key and every later hit within it
    counts against `max_requests`. The window resets whole once it expires.
    """

    def __init__(self, max_requests: int, window_seconds: int, clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, Window] = {}
        self._lock = Lock()
        self._next_sweep = clock() + window_seconds

    def hit(self, key: str) -> bool:
        """Record one request for `key`; False when it exceeds the budget."""
        now = self._clock()
        with self._lock:
            if now >= self._next_sweep:
                self._sweep(now)
            window = self._windows.get(key)
            if window is None or self._expired(window, now):
                window = Window(started_at=now)
                self._windows[key] = window
            window.count += 1
            return window.count <= self.max_requests

    def retry_after(self, key: str) -> int:
        with self._lock:
            window = self._windows.get(key)
        if window is None:
            return 0
        return max(0, int(window.started_at + self.window_seconds - self._clock()))

    def _expired(self, window: Window, now: float) -> bool:
        return now - window.started_at >= self.window_seconds

    def _sweep(self, now: float) -> None:
        """Drop expired windows. Runs under `_lock` at most once per window."""
        expired = [key for key, window in self._windows.items() if self._expired(window, now)]
        for key in expired:
            del self._windows[key]
        self._next_sweep = now + self.window_seconds

    @property
    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._windows)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()


class RateLimitMiddleware:
    """ASGI middleware applying one limiter to every path under `prefix`."""

    def __init__(self, app: ASGIApp, limiter: FixedWindowRateLimiter | None = None, prefix: str = "/api"):
        self.app = app
        self.prefix = prefix
        self.limiter = limiter

    def _limiter(self) -> FixedWindowRateLimiter:
        if self.limiter is None:
            settings = get_settings()
            self.limiter = FixedWindowRateLimiter(settings.rate_limit_max, settings.rate_limit_window_seconds)
        return self.limiter

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not scope["path"].startswith(self.prefix):
            await self.app(scope, receive, send)
            return

        if not get_settings().rate_limit_enabled:
            await self.app(scope, receive, send)
            return

        client = scope.get("client")
        key = client[0] if client else "unknown"
        limiter = self._limiter()

        if not limiter.hit(key):
            logger.warning("Rate limit exceeded", client=key, path=scope["path"])
            response = JSONResponse(
                status_code=429,
                content={"detail": "Too many requests from this IP, please try again later."},
                headers={"Retry-After": str(limiter.retry_after(key))},
            )
            await response(scope, receive, send)
            return

        await self.app(scope, receive, send)

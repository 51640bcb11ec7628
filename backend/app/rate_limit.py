"""
Limitation de débit du formulaire public d'inscription.

Fenêtre glissante en mémoire, par adresse IP : au plus N requêtes sur les
W dernières secondes. Compteurs propres au processus, remis à zéro au
redémarrage et non partagés entre instances.
"""

import logging
import threading
import time
from collections import deque
from typing import Callable, Deque, Dict

from fastapi import HTTPException, Request, status

from app.config import settings

logger = logging.getLogger(__name__)


class RateLimitExceeded(HTTPException):
    """Réponse 429 avec l'en-tête Retry-After."""

    def __init__(self, limit: int, window_seconds: int):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=f"Too many requests. Maximum {limit} requests per {window_seconds} seconds.",
            headers={"Retry-After": str(window_seconds)},
        )


class RateLimiter:
    def __init__(self, limit: int, window_seconds: int, clock: Callable[[], float] = time.monotonic):
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def __len__(self) -> int:
        """Nombre de clés (IP) actuellement suivies."""
        return len(self._hits)

    def hit(self, key: str) -> bool:
        """Enregistre une requête pour `key`. Retourne False si la limite est atteinte."""
        now = self._clock()
        window_start = now - self.window_seconds
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(window_start)
                self._last_sweep = now
            hits = self._hits.setdefault(key, deque())
            while hits and hits[0] <= window_start:
                hits.popleft()
            if len(hits) >= self.limit:
                return False
            hits.append(now)
            return True

    def _sweep(self, window_start: float) -> None:
        # Au plus une fois par fenêtre : oublie les IP sans requête récente
        stale = [key for key, hits in self._hits.items() if not hits or hits[-1] <= window_start]
        for key in stale:
            del self._hits[key]

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


registration_limiter = RateLimiter(
    limit=settings.RATE_LIMIT_MAX_REQUESTS,
    window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
)


def limit_registrations(request: Request) -> None:
    """Dépendance FastAPI : applique la limite du formulaire public à l'IP cliente."""
    client_ip = request.client.host if request.client else "unknown"
    if not registration_limiter.hit(client_ip):
        logger.warning(
            "Limite atteinte pour %s : %d/%ds",
            client_ip, registration_limiter.limit, registration_limiter.window_seconds,
        )
        raise RateLimitExceeded(registration_limiter.limit, registration_limiter.window_seconds)

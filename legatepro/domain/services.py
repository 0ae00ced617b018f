"""
Name: Domain Service Interfaces (Ports)

Responsibilities:
  - Define the contract for the cache of server-rendered estate views

Collaborators:
  - application.guards: invalidates paths after a successful mutation
  - application.usecases.readiness: caches the estate overview payload
  - infrastructure.cache: in-memory and Redis implementations

Notes:
  - Keys are page paths such as "/app/estates/<id>/rent"
"""

from __future__ import annotations

from typing import Any, Iterable, Protocol


class PageCache(Protocol):
    def get(self, path: str) -> Any | None:
        """Return the cached payload for a page path, or None on a miss."""
        ...

    def set(self, path: str, payload: Any) -> None:
        ...

    def revalidate(self, paths: Iterable[str]) -> None:
        """Drop cached payloads so the next read re-renders them."""
        ...

"""In-process, TTL-bounded store of session contexts.

TTL is enforced at read time against the last write: an entry older than
``ttl`` is reported as absent even while it still sits in the mapping.
``purge_expired`` drops such entries but nothing requires it to run.

Contexts are copied on the way in and on the way out, so a turn that
fails half-way never leaves a partially updated context behind.  There is
no locking: concurrent turns for one session are last-write-wins.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import AsyncGenerator, Callable
from datetime import datetime, timedelta, timezone
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from flybus.configs.config import AppConfig, get_app_config
from flybus.infra.lifespan import get_app

from .models import SessionContext

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionContextStore:
    """Keyed store of ``SessionContext`` with lazy TTL expiry."""

    def __init__(self, ttl: timedelta, clock: Clock = utc_now) -> None:
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[str, tuple[SessionContext, datetime]] = {}

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def now(self) -> datetime:
        return self._clock()

    def get(self, session_id: str) -> SessionContext | None:
        """Return a copy of the live context, or ``None`` if absent or stale."""
        entry = self._entries.get(session_id)
        if entry is None:
            return None
        context, written_at = entry
        if self._is_expired(written_at):
            logger.debug("Context for session %s expired", session_id)
            return None
        return copy.deepcopy(context)

    def put(self, session_id: str, context: SessionContext) -> None:
        self._entries[session_id] = (copy.deepcopy(context), self._clock())

    def purge_expired(self) -> int:
        """Physically remove stale entries; returns how many were dropped."""
        stale = [
            session_id
            for session_id, (_, written_at) in self._entries.items()
            if self._is_expired(written_at)
        ]
        for session_id in stale:
            del self._entries[session_id]
        return len(stale)

    def _is_expired(self, written_at: datetime) -> bool:
        return self._clock() - written_at > self._ttl

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)


# ---------------------------------------------------------------------------
# Lifespan dependency
# ---------------------------------------------------------------------------


async def build_session_store(
    app: Annotated[FastAPI, Depends(get_app)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> AsyncGenerator[None, None]:
    """Create the process-wide ``SessionContextStore`` on ``app.state``."""
    store = SessionContextStore(ttl=config.session.ttl)
    app.state.session_store = store
    logger.info("Session context store ready (ttl=%s)", config.session.ttl)
    yield
    dropped = store.purge_expired()
    logger.info(
        "Session context store closed (%d live, %d expired dropped)",
        len(store),
        dropped,
    )


def get_session_store(request: Request) -> SessionContextStore:
    return request.app.state.session_store

"""
Ownership variants for the engine session held by an InferenceSession.

A session loaded from a file path is held by value (EmbeddedSession); one
loaded from in-memory bytes is owned (OwnedSession) and released through the
engine. Both expose the same ``session`` accessor and ``close`` contract, so
the caller never needs to know which mode is active.
"""

from typing import Optional, Union

from ort_fuzz_lite.engine.engine import Engine, EngineSession


class EmbeddedSession:
    """Session held by value. Closing drops it without the engine release path."""

    owned = False

    def __init__(self, session: EngineSession) -> None:
        self._session: Optional[EngineSession] = session

    @property
    def session(self) -> EngineSession:
        if self._session is None:
            raise RuntimeError("session is closed")
        return self._session

    @property
    def closed(self) -> bool:
        return self._session is None

    def close(self) -> None:
        session, self._session = self._session, None
        if session is not None:
            session.close()


class OwnedSession:
    """Session owned by the holder and released through its engine exactly once."""

    owned = True

    def __init__(self, session: EngineSession, engine: Engine) -> None:
        self._session: Optional[EngineSession] = session
        self._engine = engine

    @property
    def session(self) -> EngineSession:
        if self._session is None:
            raise RuntimeError("session is closed")
        return self._session

    @property
    def closed(self) -> bool:
        return self._session is None

    def close(self) -> None:
        session, self._session = self._session, None
        if session is not None:
            self._engine.release_session(session)


SessionSlot = Union[EmbeddedSession, OwnedSession]

"""API Dependencies — access to the process-wide SnippetEngine.

Invariants:
    - One SnippetEngine per process, created by the lifespan and stored on app.state

Design Decisions:
    - Dependency function (not a module global) so tests override it with
      app.dependency_overrides
"""

from fastapi import Request

from snipvault.services.snippet_engine import SnippetEngine


def get_engine(request: Request) -> SnippetEngine:
    """FastAPI dependency for the snippet engine."""
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise RuntimeError("Snippet engine not initialized")
    return engine

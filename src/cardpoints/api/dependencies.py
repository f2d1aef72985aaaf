from fastapi import Header, HTTPException, Request

from cardpoints.errors import (
    AuthenticationError,
    PersistenceError,
    RewardEngineError,
    ValidationError,
)
from cardpoints.services.orchestrator import RewardOrchestrator


def get_orchestrator(request: Request) -> RewardOrchestrator:
    return request.app.state.orchestrator


def bearer_token(authorization: str | None = Header(default=None)) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def to_http_exception(exc: RewardEngineError) -> HTTPException:
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, AuthenticationError):
        return HTTPException(status_code=401, detail=str(exc))
    if isinstance(exc, PersistenceError):
        return HTTPException(status_code=503, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))

"""Log write endpoints guarded by a verified Supabase session."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Body, Depends, Header, HTTPException, Request, status
from fastapi.responses import JSONResponse

from neurostack.domain.entries import SessionUser, entry_to_row
from neurostack.domain.errors import EntryValidationError, LogNotFoundError
from neurostack.services.logs import LogService

if TYPE_CHECKING:
    from neurostack.containers import AppContainer

router = APIRouter(prefix="/api/logs", tags=["logs"])

_BEARER_PREFIX = "bearer "


def _get_log_service(request: Request) -> LogService:
    container: AppContainer = request.app.state.container
    if container.log_service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Supabase is not configured",
        )
    return container.log_service


async def require_user(
    request: Request,
    authorization: str | None = Header(default=None),
) -> SessionUser:
    """Resolve the bearer token to a user; anything else is 401."""
    container: AppContainer = request.app.state.container
    token = _bearer_token(authorization)
    if token is None or container.identity_verifier is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    user = container.identity_verifier.verify(token)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return user


@router.post("")
async def create_log(
    payload: dict[str, Any] = Body(...),
    user: SessionUser = Depends(require_user),
    log_service: LogService = Depends(_get_log_service),
) -> Any:
    """Insert a log owned by the authenticated user."""
    try:
        entry = log_service.create_log(user, payload)
    except EntryValidationError as exc:
        return _validation_response(exc)
    return entry_to_row(entry)


@router.patch("")
async def update_log(
    payload: dict[str, Any] = Body(...),
    user: SessionUser = Depends(require_user),
    log_service: LogService = Depends(_get_log_service),
) -> Any:
    """Apply a partial update to one of the user's logs."""
    log_id = payload.get("id")
    if not isinstance(log_id, str) or not log_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Missing log id"
        )
    try:
        entry = log_service.update_log(user, log_id, payload)
    except EntryValidationError as exc:
        return _validation_response(exc)
    except LogNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    return entry_to_row(entry)


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization or not authorization.lower().startswith(_BEARER_PREFIX):
        return None
    token = authorization[len(_BEARER_PREFIX) :].strip()
    return token or None


def _validation_response(exc: EntryValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            "errors": [
                {"field": error.field, "message": error.message}
                for error in exc.errors
            ]
        },
    )

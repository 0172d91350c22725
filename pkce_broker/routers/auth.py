"""
Authentication routes.
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Request
from pydantic import ValidationError

from ..exceptions.auth_exceptions import InvalidRequestException
from ..middleware.logging_config import get_logger
from ..models.auth import CallbackResponse, LoginRequest, LoginResponse
from ..services.auth_service import AuthService

logger = get_logger("auth_router")
router = APIRouter(prefix="/auth", tags=["authentication"])

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def get_auth_service(request: Request) -> AuthService:
    """Dependency to get the application's auth service."""
    return request.app.state.auth_service


async def _read_login_body(request: Request) -> Dict[str, Any]:
    """Accept JSON or form-encoded login bodies."""
    # Media types compare case-insensitively.
    media_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    if media_type in FORM_CONTENT_TYPES:
        form = await request.form()
        return dict(form)

    raw = await request.body()
    if not raw:
        return {}
    try:
        body = await request.json()
    except ValueError:
        raise InvalidRequestException(details="Request body must be a JSON object")
    if not isinstance(body, dict):
        raise InvalidRequestException(details="Request body must be a JSON object")
    return body


def _validation_details(exc: ValidationError) -> str:
    """Name the body fields that failed validation."""
    fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
    return f"Invalid value for: {', '.join(fields)}"


@router.post("/login", response_model=LoginResponse, response_model_by_alias=True)
async def login(
    request: Request,
    auth_service: AuthService = Depends(get_auth_service)
) -> LoginResponse:
    """
    Start a login: store a PKCE transaction and return the provider authorization URL.
    """
    body = await _read_login_body(request)
    try:
        login_request = LoginRequest.model_validate(body)
    except ValidationError as exc:
        raise InvalidRequestException(details=_validation_details(exc))

    auth_url = auth_service.start_login(
        login_request.client_id,
        login_request.redirect_uri,
        login_request.scopes,
    )
    return LoginResponse(auth_url=auth_url)


@router.get("/callback", response_model=CallbackResponse)
async def callback(
    code: Optional[str] = Query(default=None),
    state: Optional[str] = Query(default=None),
    error: Optional[str] = Query(default=None),
    error_description: Optional[str] = Query(default=None),
    auth_service: AuthService = Depends(get_auth_service)
) -> CallbackResponse:
    """
    Handle the provider redirect and exchange the authorization code for a token.
    """
    result = await auth_service.handle_callback(code, state, error, error_description)
    return CallbackResponse(**result)

"""
API v1 routes.

Defines REST endpoints for the account registration API.
"""

from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from src.api.dependencies import get_registration_record, get_registration_service
from src.api.models import ErrorResponse, RegisterResponse
from src.domain.registration import RegistrationService

router = APIRouter(tags=["v1"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Malformed request body"},
        422: {"model": ErrorResponse, "description": "Validation error or username taken"},
        500: {"model": ErrorResponse, "description": "Internal error"},
    },
    summary="Register a new user",
    description="Submit username, password and role to create an account. "
    "Accepts a JSON object or a form-encoded body.",
)
async def register(
    record: dict[str, Any] = Depends(get_registration_record),
    service: RegistrationService = Depends(get_registration_service),
) -> RegisterResponse | JSONResponse:
    """
    Register a new user.

    - **username**: Non-empty, no leading/trailing whitespace
    - **password**: 8-72 characters, no leading/trailing whitespace
    - **role**: Any string

    Exactly one response is sent: 201 on success, otherwise the error's
    own status code with a structured body.
    """
    result = await service.register(record)

    if result.error is not None:
        return JSONResponse(status_code=result.error.code, content=result.error.as_dict())

    user = result.user
    return RegisterResponse(
        message="You have successfully registered. You can login now.",
        **user.api_repr(),
    )

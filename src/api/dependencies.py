"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

import json
from typing import Any

from fastapi import HTTPException, Request, status

from src.domain.ports import UserStore
from src.domain.registration import RegistrationService

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def get_user_store(request: Request) -> UserStore:
    """
    Get user store from app state.

    The store is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.user_store


def get_registration_service(request: Request) -> RegistrationService:
    """Create registration service wired to the configured user store."""
    return RegistrationService(store=get_user_store(request))


def is_json_media_type(media_type: str) -> bool:
    return media_type == "application/json" or media_type.endswith("+json")


async def get_registration_record(request: Request) -> dict[str, Any]:
    """
    Decode the request body into a raw record for the validator.

    Accepts JSON or form-encoded bodies. No coercion is applied so the
    validator sees the original value types; a repeated form key arrives
    as a list. An empty body, a JSON value that is not an object, or an
    unsupported content type yields an empty record.

    Raises:
        HTTPException: 400 if a JSON body is not valid JSON
    """
    content_type = request.headers.get("content-type", "")
    media_type = content_type.split(";", 1)[0].strip().lower()

    if media_type in FORM_CONTENT_TYPES:
        form = await request.form()
        return {
            key: values[0] if len(values) == 1 else values
            for key in form
            for values in [form.getlist(key)]
        }

    # Untyped bodies are still read as JSON
    if media_type and not is_json_media_type(media_type):
        return {}

    body = await request.body()
    if not body.strip():
        return {}
    try:
        data = json.loads(body)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Malformed request body",
        ) from None
    return data if isinstance(data, dict) else {}

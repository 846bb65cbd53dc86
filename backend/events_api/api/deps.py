"""
Request-scoped dependencies.

Collaborators live on app.state, set once by create_app() or the lifespan
hook, and are handed to routes through Depends() rather than module globals.
"""

import json
from typing import Any, Optional

from fastapi import Request

from events_api.core.config import Settings
from events_api.core.errors import ConfigurationError, MalformedInputError
from events_api.services.interfaces.store import EventStore
from events_api.services.interfaces.upload import UploadAuthorizer


def _reject_constant(token: str) -> Any:
    """NaN and Infinity are Python extensions, not JSON."""
    raise ValueError(f"Invalid JSON token {token}")


_JSON_TYPE_NAMES = {
    list: "array",
    str: "string",
    int: "number",
    float: "number",
    bool: "boolean",
    type(None): "null",
}


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> EventStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise ConfigurationError("Event store is not initialized")
    return store


def get_upload_authorizer(request: Request) -> Optional[UploadAuthorizer]:
    """May be None; the upload operation reports the missing bucket itself."""
    return getattr(request.app.state, "upload_authorizer", None)


async def read_json_object(request: Request) -> dict[str, Any]:
    """
    Read the body as a JSON object.

    Parse failures echo a bounded preview of what was received.
    """
    settings: Settings = request.app.state.settings
    raw = (await request.body()).decode("utf-8", errors="replace").strip()
    if not raw:
        raise MalformedInputError("Missing body")

    try:
        payload = json.loads(raw, parse_constant=_reject_constant)
    except ValueError:
        raise MalformedInputError(
            "Body must be valid JSON",
            receivedPreview=raw[: settings.BODY_PREVIEW_CHARS],
            receivedLength=len(raw),
            contentType=request.headers.get("content-type"),
        )

    if not isinstance(payload, dict):
        raise MalformedInputError(
            "Body must be a JSON object",
            receivedType=_JSON_TYPE_NAMES.get(type(payload), type(payload).__name__),
        )
    return payload

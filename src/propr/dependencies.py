"""FastAPI dependency injection providers."""

import hmac
import json
from typing import Annotated

from fastapi import Depends, Request

from propr.config import Settings
from propr.errors.exceptions import AuthenticationError
from propr.jobs.executor import BaseExecutor
from propr.jobs.store import JobStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> JobStore:
    """Return the job store owned by the application."""
    return request.app.state.job_store


def get_executor(request: Request) -> BaseExecutor:
    return request.app.state.executor


def get_trace_id(request: Request) -> str:
    """Extract trace_id from request state (set by middleware)."""
    return getattr(request.state, "trace_id", "unknown")


async def require_client_key(request: Request) -> None:
    """Reject the request unless X-Client-Key matches the configured key."""
    settings: Settings = request.app.state.settings
    presented = request.headers.get("x-client-key", "")
    if hmac.compare_digest(presented.encode("utf-8"), settings.client_key.encode("utf-8")):
        return
    if settings.reveal_client_key:
        raise AuthenticationError(f'Invalid or missing X-Client-Key. Expected: "{settings.client_key}"')
    raise AuthenticationError()


async def get_json_body(request: Request) -> dict:
    """Parse the request body as a JSON object.

    Anything that is not a JSON object degrades to ``{}`` so that field
    validation reports precisely what is missing.
    """
    raw = await request.body()
    try:
        body = json.loads(raw)
    except (UnicodeDecodeError, ValueError):
        return {}
    return body if isinstance(body, dict) else {}


# Type aliases for dependency injection
Store = Annotated[JobStore, Depends(get_store)]
Executor = Annotated[BaseExecutor, Depends(get_executor)]
JsonBody = Annotated[dict, Depends(get_json_body)]
TraceId = Annotated[str, Depends(get_trace_id)]
RequireClientKey = Depends(require_client_key)

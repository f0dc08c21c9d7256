"""FastAPI dependencies for authentication and shared resources."""

import secrets

from fastapi import Depends, Header, HTTPException, status

from api.models.responses import ErrorCodes
from core.config import (
    DIRECTIVE_API_KEYS,
    MONGO_DEFAULT_INSTANCE,
    MONGO_INSTANCES,
    RESPONSIBLE_API_KEYS,
)
from core.database import DocumentExecutor, MongoExecutor
from models.roles import CallerContext, SystemRole


def _key_matches(candidate: str, keys: list[str]) -> bool:
    # Check every key so timing does not reveal which one matched
    matched = False
    for key in keys:
        if secrets.compare_digest(candidate.encode(), key.encode()):
            matched = True
    return matched


def resolve_role(api_key: str) -> SystemRole | None:
    """Highest role granted to an API key, or None if the key is unknown."""
    if _key_matches(api_key, DIRECTIVE_API_KEYS):
        return SystemRole.DIRECTIVE
    if _key_matches(api_key, RESPONSIBLE_API_KEYS):
        return SystemRole.RESPONSIBLE
    return None


async def get_caller(
    x_api_key: str | None = Header(None, alias="X-API-Key"),
    x_instance: str | None = Header(None, alias="X-Instance"),
) -> CallerContext:
    """
    Authenticate the caller and resolve the database instance for the request.

    Raises:
        HTTPException: 500 if no keys are configured, 401 if the key is missing
            or invalid, 400 if the requested instance is unknown
    """
    if not RESPONSIBLE_API_KEYS and not DIRECTIVE_API_KEYS:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "success": False,
                "message": "API keys not configured on server",
                "errorType": ErrorCodes.UNKNOWN_ERROR,
            },
        )

    role = resolve_role(x_api_key) if x_api_key else None
    if role is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "success": False,
                "message": "Invalid or missing API key",
                "errorType": ErrorCodes.UNAUTHORIZED,
            },
        )

    instance = x_instance or MONGO_DEFAULT_INSTANCE
    if instance not in MONGO_INSTANCES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "success": False,
                "message": f"Unknown database instance '{instance}'",
                "errorType": ErrorCodes.INVALID_PARAMETERS,
            },
        )

    return CallerContext(role=role, instance=instance)


def require_role(required: SystemRole):
    """Build a dependency asserting the caller holds at least `required`."""

    async def dependency(caller: CallerContext = Depends(get_caller)) -> CallerContext:
        if not caller.authorize(required):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={
                    "success": False,
                    "message": f"This operation requires the {required.value} role",
                    "errorType": ErrorCodes.INSUFFICIENT_PERMISSIONS,
                },
            )
        return caller

    return dependency


require_responsible = require_role(SystemRole.RESPONSIBLE)


async def get_executor(caller: CallerContext = Depends(get_caller)) -> DocumentExecutor:
    """Executor bound to the caller's role."""
    return MongoExecutor(authorize=caller.authorize)

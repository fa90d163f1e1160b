"""
User endpoints.

Five routes implement the CRUD contract of the users resource.  Request
bodies and path parameters are validated by FastAPI against the schemas
in ``schemas.user`` before a handler runs, so a handler only ever sees
well‑formed input.  Every handler answers with the ``{success, result}``
envelope; failures are raised as ``HTTPException`` and rendered by the
handlers in ``core.errors``.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from users_api.app.core.errors import envelope
from users_api.app.schemas.user import UserCreate, UserUpdate
from users_api.app.services.user_service import UserService

router = APIRouter()

USER_NOT_FOUND = "User not found"
NO_FIELDS_TO_UPDATE = "At least one field must be updated"


@router.post("/create", status_code=status.HTTP_201_CREATED)
async def create_user(
    user_in: UserCreate,
    service: UserService = Depends(UserService.from_pool),
) -> Dict[str, Any]:
    """Create a user and return the id assigned by the database."""
    user_id = await service.create_user(user_in)
    return envelope(True, {"id": user_id})


@router.get("/get")
async def list_users(
    role: Optional[str] = Query(None, description="Only return users with this role"),
    service: UserService = Depends(UserService.from_pool),
) -> Dict[str, Any]:
    """Return all users, optionally filtered by exact role."""
    users = await service.list_users(role)
    return envelope(True, {"users": [user.model_dump() for user in users]})


@router.get("/get/{user_id}")
async def get_user(
    user_id: int,
    service: UserService = Depends(UserService.from_pool),
) -> Dict[str, Any]:
    user = await service.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=USER_NOT_FOUND)
    return envelope(True, {"user": user.model_dump()})


@router.patch("/update/{user_id}")
async def update_user(
    user_id: int,
    user_in: Optional[UserUpdate] = None,
    service: UserService = Depends(UserService.from_pool),
) -> Dict[str, Any]:
    """Update any subset of ``full_name``, ``role`` and ``efficiency``.

    The response carries the row as read back after the update rather
    than the submitted values.
    """
    if user_in is None or not user_in.assignments():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=NO_FIELDS_TO_UPDATE)
    user = await service.update_user(user_id, user_in)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=USER_NOT_FOUND)
    return envelope(True, user.model_dump())


@router.delete("/delete/{user_id}")
async def delete_user(
    user_id: int,
    service: UserService = Depends(UserService.from_pool),
) -> Dict[str, Any]:
    """Delete one user and return the row as it was before deletion."""
    user = await service.delete_user(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=USER_NOT_FOUND)
    return envelope(True, user.model_dump())


@router.delete("/delete")
async def delete_all_users(
    service: UserService = Depends(UserService.from_pool),
) -> Dict[str, Any]:
    """Delete every user.  The acknowledgment carries no row data."""
    await service.delete_all_users()
    return envelope(True)

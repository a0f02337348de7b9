import logging

from fastapi import APIRouter, Depends, HTTPException, status

from myknowledge.dependencies import auth_helper, get_user_service
from myknowledge.users.models import MetadataUpdateRequest
from myknowledge.users.service import UserService, UserServiceError

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/users",
    tags=["Users"]
)


@router.get("/me")
async def get_my_profile(
    user_id: str = Depends(auth_helper.get_current_user_id),
    users: UserService = Depends(get_user_service)
):
    try:
        return await users.get_user_by_id(user_id)
    except UserServiceError as e:
        logger.error(f"[USERS_ME] Error fetching user profile for {user_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to fetch user profile")


@router.put("/me/metadata")
async def update_my_metadata(
    request: MetadataUpdateRequest,
    user_id: str = Depends(auth_helper.get_current_user_id),
    users: UserService = Depends(get_user_service)
):
    if not isinstance(request.metadata, dict):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Metadata object is required")
    try:
        updated_user = await users.update_user_metadata(user_id, request.metadata)
    except UserServiceError as e:
        logger.error(f"[USERS_METADATA] Error updating metadata for {user_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update user metadata")
    return {"success": True, "user": updated_user}


@router.get("/me/organizations")
async def get_my_organizations(
    user_id: str = Depends(auth_helper.get_current_user_id),
    users: UserService = Depends(get_user_service)
):
    try:
        return await users.get_user_organizations(user_id)
    except UserServiceError as e:
        logger.error(f"[USERS_ORGS] Error fetching organizations for {user_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to fetch user organizations")


@router.get("/{requested_user_id}")
async def get_user(
    requested_user_id: str,
    user_id: str = Depends(auth_helper.get_current_user_id),
    users: UserService = Depends(get_user_service)
):
    # Self access only; there is no admin role.
    if requested_user_id != user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    try:
        return await users.get_user_by_id(requested_user_id)
    except UserServiceError as e:
        logger.error(f"[USERS_GET] Error fetching user {requested_user_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to fetch user")

"""
Profile endpoints

A profile is a single PROFILE item per user holding the learner level.
"""
from fastapi import APIRouter, Depends, status

from app import schemas
from app.dynamo import UserDataRepository, get_repository
from app.middleware import UserIdentity, get_current_user

router = APIRouter(prefix="/userdata/profile", tags=["Profile"])


@router.post("", response_model=schemas.ProfileUpdateResponse, status_code=status.HTTP_200_OK)
async def update_profile(
    request: schemas.ProfileUpdate,
    user: UserIdentity = Depends(get_current_user),
    repository: UserDataRepository = Depends(get_repository),
):
    """Set the learner level (1, 2 or 3), overwriting any previous profile."""
    await repository.put_profile(user.id, request.userLevel)
    return schemas.ProfileUpdateResponse(userLevel=request.userLevel)


@router.get("", response_model=schemas.ProfileResponse, response_model_exclude_none=True)
async def get_profile(
    user: UserIdentity = Depends(get_current_user),
    repository: UserDataRepository = Depends(get_repository),
):
    """Learner level of the caller, the field is omitted when no profile exists."""
    profile = await repository.get_profile(user.id)
    return schemas.ProfileResponse(userLevel=profile.get("userLevel") if profile else None)

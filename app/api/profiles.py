"""Profile endpoints."""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.schemas.profile import ProfileEnsure, ProfileInDB, ProfileUpdate
from app.services.data_service import data_service

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.post("", response_model=ProfileInDB)
async def ensure_profile(
    profile: ProfileEnsure,
    db: AsyncSession = Depends(get_db),
):
    """
    Get or create the profile of an authenticated user.

    Called after sign-in; the first call creates the profile.
    """
    db_profile = await data_service.ensure_profile(
        db,
        profile.id,
        email=profile.email,
        role=profile.role,
        full_name=profile.full_name,
        phone=profile.phone,
    )
    if not db_profile:
        raise HTTPException(status_code=500, detail="Failed to create profile")

    return db_profile


@router.get("/{user_id}", response_model=ProfileInDB)
async def get_profile(
    user_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Get a user's profile."""
    profile = await data_service.get_user_profile(db, user_id)

    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")

    return profile


@router.patch("/{user_id}", response_model=ProfileInDB)
async def update_profile(
    user_id: str,
    profile_update: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a user's display and contact fields."""
    update_data = profile_update.model_dump(exclude_unset=True)

    if not await data_service.update_user_profile(db, user_id, update_data):
        raise HTTPException(status_code=404, detail="Profile not found")

    return await data_service.get_user_profile(db, user_id)

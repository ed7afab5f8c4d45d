from fastapi import APIRouter, Depends, HTTPException, status
from listloops.core.dependencies import get_auth_state, get_profile_store, require_session
from listloops.modules.auth.schemas import AuthViewState
from listloops.modules.users.mapper import user_initials
from listloops.modules.users.schemas import DashboardResponse, ProfileRecord, ViewUser
from listloops.modules.users.service import ProfileStore

router = APIRouter(tags=["users"])


@router.get("/users/me/profile", response_model=ProfileRecord)
async def get_my_profile(
    user: ViewUser = Depends(require_session),
    profiles: ProfileStore = Depends(get_profile_store)
):
    """Stored profile of the signed-in user"""
    profile = profiles.get(user.uid)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return profile


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    user: ViewUser = Depends(require_session),
    state: AuthViewState = Depends(get_auth_state)
):
    return DashboardResponse(user=user, initials=user_initials(user), error=state.error)

"""
Core dependencies for service wiring and route protection

The auth state behind require_session is process-wide, not per request.
"""

from fastapi import Depends, HTTPException, Request, status
from listloops.database.document_store import DocumentStore
from listloops.database.supabase_client import get_supabase
from listloops.modules.auth.provider import SupabaseIdentityProvider
from listloops.modules.auth.schemas import AuthViewState
from listloops.modules.auth.service import AuthService
from listloops.modules.auth.state import AuthStateBridge
from listloops.modules.users.schemas import ViewUser
from listloops.modules.users.service import ProfileStore
from supabase import Client
from typing import Optional
import logging

logger = logging.getLogger(__name__)


def get_document_store(supabase: Client = Depends(get_supabase)) -> DocumentStore:
    return DocumentStore(supabase)


def get_profile_store(documents: DocumentStore = Depends(get_document_store)) -> ProfileStore:
    return ProfileStore(documents)


def get_identity_provider(supabase: Client = Depends(get_supabase)) -> SupabaseIdentityProvider:
    return SupabaseIdentityProvider(supabase)


def get_auth_service(
    request: Request,
    provider: SupabaseIdentityProvider = Depends(get_identity_provider),
    profiles: ProfileStore = Depends(get_profile_store)
) -> AuthService:
    bridge = getattr(request.app.state, "auth_bridge", None)
    return AuthService(provider, profiles, bridge)


def get_auth_bridge(request: Request) -> AuthStateBridge:
    """The process-wide bridge created at startup"""
    bridge = getattr(request.app.state, "auth_bridge", None)
    if bridge is None:
        logger.error("Auth state bridge requested before startup")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication is not available"
        )
    return bridge


def get_auth_state(bridge: AuthStateBridge = Depends(get_auth_bridge)) -> AuthViewState:
    return bridge.state


def gate(state: AuthViewState, require_auth: bool = True) -> Optional[ViewUser]:
    """Decide what a protected page gets: wait, log in, or the current user"""
    if state.is_loading:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Loading...",
            headers={"Retry-After": "1"}
        )
    if not require_auth:
        return state.user
    if not state.is_authenticated or state.user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required"
        )
    return state.user


def require_session(state: AuthViewState = Depends(get_auth_state)) -> ViewUser:
    return gate(state)


def optional_session(state: AuthViewState = Depends(get_auth_state)) -> Optional[ViewUser]:
    return gate(state, require_auth=False)

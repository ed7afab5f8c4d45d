from fastapi import APIRouter, Depends, HTTPException
from listloops.modules.auth.schemas import LoginRequest, RegisterRequest, AuthResult, AuthViewState
from listloops.modules.auth.service import AuthService
from listloops.modules.users.schemas import ViewUser
from listloops.core.dependencies import get_auth_service, get_auth_state, require_session

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=AuthResult)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Sign in with email and password"""
    result = service.login(login_data.email, login_data.password)
    if not result.success:
        raise HTTPException(status_code=400, detail=result.error)
    return result


@router.post("/register", response_model=AuthResult, status_code=201)
async def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Create an account and its profile"""
    result = service.register(
        register_data.email,
        register_data.password,
        first_name=register_data.first_name,
        last_name=register_data.last_name,
        phone=register_data.phone,
        role=register_data.role,
    )
    if not result.success:
        raise HTTPException(status_code=400, detail=result.error)
    return result


@router.post("/logout", response_model=AuthResult)
async def logout(service: AuthService = Depends(get_auth_service)):
    result = service.logout()
    if not result.success:
        raise HTTPException(status_code=400, detail=result.error)
    return result


@router.get("/session", response_model=AuthViewState)
async def get_session(state: AuthViewState = Depends(get_auth_state)):
    """Current auth view state, including while it is still loading"""
    return state


@router.get("/me", response_model=ViewUser)
async def get_current_user(user: ViewUser = Depends(require_session)):
    return user

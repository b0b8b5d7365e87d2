from fastapi import APIRouter, Depends
from schemas.user import UserCreate, UserLogin, User
from schemas.session import AuthResponse, Session, SessionInfo
from crud import user_crud, session_crud
from services.auth_service import create_access_token, get_current_session, get_current_user
from services.roles import resolve_role, route_for_role

router = APIRouter()


async def _start_session(user: User) -> AuthResponse:
    role = resolve_role(user.role)
    session = await session_crud.create_session(user.uid, role)
    return AuthResponse(
        access_token=create_access_token(session),
        expires_at=session.expires_at,
        role=role,
        route=route_for_role(role),
        user=user
    )


@router.post("/register", response_model=AuthResponse)
async def register(user: UserCreate):
    created = await user_crud.create_user(user)
    return await _start_session(created)


@router.post("/login", response_model=AuthResponse)
async def login(login_data: UserLogin):
    user = await user_crud.login_user(login_data)
    return await _start_session(user)


@router.post("/logout")
async def logout(session: Session = Depends(get_current_session)):
    await session_crud.delete_session(session.session_id)
    return {"status": "logged_out"}


@router.post("/logout-all")
async def logout_everywhere(session: Session = Depends(get_current_session)):
    removed = await session_crud.delete_user_sessions(session.uid)
    return {"status": "logged_out", "sessions_removed": removed}


@router.get("/session", response_model=SessionInfo)
async def restore_session(
    session: Session = Depends(get_current_session),
    current_user: User = Depends(get_current_user)
):
    """Re-read the role from the profile so role changes apply on the next launch."""
    role = resolve_role(current_user.role)
    return SessionInfo(
        uid=current_user.uid,
        email=current_user.email,
        role=role,
        route=route_for_role(role),
        expires_at=session.expires_at
    )

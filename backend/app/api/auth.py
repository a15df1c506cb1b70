"""Authentication API endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, get_session_service
from app.config import get_settings
from app.exceptions import DuplicateAccountError, InvalidCredentialsError, UserNotFoundError
from app.models.user import User
from app.schemas.auth import UserLogin, UserRegister, UserResponse
from app.services.sessions import SessionService
from app.services.users import authenticate_user, register_user

router = APIRouter(prefix="/auth", tags=["auth"])
settings = get_settings()

INVALID_CREDENTIALS = "Invalid credentials"


def set_session_cookie(response: Response, token: str) -> None:
    """Issue the HttpOnly session cookie."""
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite=settings.session_cookie_samesite,
        path=settings.session_cookie_path,
        max_age=settings.session_max_age_seconds,
    )


def clear_session_cookie(response: Response) -> None:
    """Expire the session cookie on the client (empty value, Max-Age=0)."""
    response.delete_cookie(
        key=settings.session_cookie_name,
        path=settings.session_cookie_path,
        secure=settings.session_cookie_secure,
        httponly=True,
        samesite=settings.session_cookie_samesite,
    )


def get_user_agent(request: Request) -> str:
    return request.headers.get("user-agent", "")


def get_request_ip(request: Request) -> str | None:
    """Extract best-effort client IP for session metadata."""
    xff = request.headers.get("x-forwarded-for")
    if xff and xff.strip():
        return xff.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip and real_ip.strip():
        return real_ip.strip()
    if request.client:
        return request.client.host
    return None


def start_session(
    sessions: SessionService,
    user: User,
    request: Request,
    response: Response,
) -> None:
    """Create a server-side session for ``user`` and attach its cookie."""
    try:
        token = sessions.create(user.id, get_user_agent(request), get_request_ip(request))
    except UserNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_CREDENTIALS,
        )
    set_session_cookie(response, token)


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    sessions: SessionService = Depends(get_session_service),
):
    """Register a new user and sign them in."""
    try:
        user = register_user(db, user_data.username, user_data.email, user_data.password)
    except DuplicateAccountError as e:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    start_session(sessions, user, request, response)
    db.commit()
    db.refresh(user)

    return UserResponse.model_validate(user)


@router.post("/login", response_model=UserResponse)
def login(
    user_data: UserLogin,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    sessions: SessionService = Depends(get_session_service),
):
    """Verify credentials and start a session."""
    try:
        user = authenticate_user(db, user_data.email_or_username, user_data.password)
    except InvalidCredentialsError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_CREDENTIALS,
        )

    start_session(sessions, user, request, response)
    db.commit()
    db.refresh(user)

    return UserResponse.model_validate(user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    request: Request,
    db: Session = Depends(get_db),
    sessions: SessionService = Depends(get_session_service),
):
    """Revoke the current session, if any. The cookie is cleared regardless."""
    token = request.cookies.get(settings.session_cookie_name)
    if token:
        sessions.revoke(token)
        db.commit()

    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    clear_session_cookie(response)
    return response


@router.post("/logout-all", status_code=status.HTTP_204_NO_CONTENT)
def logout_all(
    db: Session = Depends(get_db),
    sessions: SessionService = Depends(get_session_service),
    current_user: User = Depends(get_current_user),
):
    """Sign the current user out on every device."""
    sessions.revoke_all(current_user.id)
    db.commit()

    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    clear_session_cookie(response)
    return response


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    """Return the signed-in user."""
    return UserResponse.model_validate(current_user)

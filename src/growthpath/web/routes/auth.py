"""Account endpoints: sign-up, sign-in and the current user."""

from fastapi import APIRouter, Depends, HTTPException, status

from growthpath.core.accounts import (
    AccountError,
    AuthenticationError,
    Session,
    sign_in,
    sign_up,
)
from growthpath.web.deps import get_session
from growthpath.web.schemas import (
    SessionResponse,
    SignInRequest,
    SignUpRequest,
    UserResponse,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def signup(body: SignUpRequest) -> UserResponse:
    """Create an account; students also get a student row."""
    try:
        user = sign_up(body.email, body.password, body.full_name, body.role)
    except AccountError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return UserResponse.model_validate(user)


@router.post("/signin", response_model=SessionResponse)
def signin(body: SignInRequest) -> SessionResponse:
    """Exchange email and password for a bearer token."""
    try:
        session = sign_in(body.email, body.password)
    except AuthenticationError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e)) from e
    return SessionResponse(
        access_token=session.access_token,
        user=UserResponse.model_validate(session.user),
    )


@router.get("/me", response_model=UserResponse)
def me(session: Session = Depends(get_session)) -> UserResponse:
    """Profile of the signed-in user."""
    return UserResponse.model_validate(session.user)

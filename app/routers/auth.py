import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.errors import AuthenticationError, PermissionDenied
from app.core.security.auth import verify_password, generate_token, get_current_user
from app.core.security.principals import link_faculty_profile
from app.db.session import get_db
from app.models.user import User, RoleType
from app.schemas.user import (
    FacultyProfile, LoginRequest, LoginResponse, RegisterRequest, UserDisplay,
)
from app.services import directory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])

@router.post("/login", response_model=LoginResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    query = db.query(User).filter(User.email == request.email)
    if request.role is not None:
        query = query.filter(User.role == request.role)

    # One email may hold several accounts (one per role); take the first the password opens
    user = next(
        (
            candidate for candidate in query.order_by(User.id).all()
            if verify_password(request.password, candidate.hashed_password)
        ),
        None
    )
    if not user:
        logger.warning("Failed login for %s", request.email)
        raise AuthenticationError("Invalid email or password")

    faculty_profile = None
    if user.role == RoleType.FACULTY and link_faculty_profile(db, user) is not None:
        faculty_profile = FacultyProfile.model_validate(user.faculty_profile)

    logger.info("User %s logged in as %s", user.id, user.role.value)
    return LoginResponse(
        access_token=generate_token(user),
        user=UserDisplay.model_validate(user),
        faculty_profile=faculty_profile
    )

@router.post("/register", response_model=LoginResponse, status_code=status.HTTP_201_CREATED)
def register(request: RegisterRequest, db: Session = Depends(get_db)):
    if request.role == RoleType.ADMIN:
        raise PermissionDenied("Admin accounts cannot be self-registered")

    user = directory.create_user(
        db,
        name=request.name,
        email=request.email,
        role=request.role,
        password=request.password
    )
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s as %s", user.id, user.role.value)
    return LoginResponse(access_token=generate_token(user), user=UserDisplay.model_validate(user))

@router.get("/me", response_model=UserDisplay)
def me(current_user: User = Depends(get_current_user)):
    return current_user

@router.post("/logout")
def logout(current_user: User = Depends(get_current_user)):
    # Tokens are stateless; the client discards its copy
    return {"message": "Logged out successfully"}

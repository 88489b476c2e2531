"""
Authentication endpoints
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.deps import get_db, get_current_user
from app.core.security import create_access_token
from app.models.user import User
from app.schemas.auth import LoginRequest, TokenResponse, CurrentUserOut
from app.services.activity_service import log_activity
from app.services.user_service import authenticate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    db: Session = Depends(get_db)
):
    """
    Authenticate user and return JWT token

    Rejects unknown usernames, wrong passwords and inactive accounts.
    """
    user = authenticate(db, login_data.username, login_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password"
        )

    if not user.active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive"
        )

    # JWT 'sub' claim must be a string
    token_data = {
        "sub": str(user.id),
        "username": user.username,
        "role": user.role.value,
    }
    access_token = create_access_token(data=token_data)

    if log_activity(db, user.id, "LOGIN", "User", user.id) is not None:
        db.commit()
    logger.info("User %s logged in", user.id)

    return TokenResponse(access_token=access_token, token_type="bearer")


@router.get("/me", response_model=CurrentUserOut)
async def me(current_user: User = Depends(get_current_user)):
    """The authenticated user"""
    employee = current_user.employee
    return CurrentUserOut(
        id=current_user.id,
        username=current_user.username,
        full_name=current_user.full_name,
        role=current_user.role,
        department_id=current_user.department_id,
        employee_id=employee.id if employee else None,
    )

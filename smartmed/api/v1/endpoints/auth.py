from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from smartmed.core.database import get_db
from smartmed.core.session import get_session_user
from smartmed.models.doctor import Doctor
from smartmed.schemas.auth import AccountMenu, AuthUser, MenuLink
from smartmed.services.doctor_service import get_doctor_by_id

router = APIRouter()


@router.get("/health", tags=["auth"])
async def auth_health_check() -> dict:
    """
    Simple health check for the auth module.
    """
    return {"status": "auth-ok"}


def get_current_doctor(
    user: AuthUser | None = Depends(get_session_user),
    db: Session = Depends(get_db),
) -> Doctor:
    """
    Dependency resolving the doctor behind the current session.
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    doctor = get_doctor_by_id(db, user.id)
    if doctor is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No doctor account for this user",
        )

    return doctor


@router.get("/account-menu", response_model=AccountMenu | None, tags=["auth"])
def read_account_menu(
    user: AuthUser | None = Depends(get_session_user),
    db: Session = Depends(get_db),
) -> AccountMenu | None:
    """
    Data for the account menu. ``null`` means the menu should not render:
    no session, or no doctor record behind it.
    """
    if user is None:
        return None

    doctor = get_doctor_by_id(db, user.id)
    if doctor is None:
        return None

    return AccountMenu(
        name=doctor.name,
        email=doctor.email,
        links=[
            MenuLink(label="Profile", href="/profile"),
            MenuLink(label="Dashboard", href="/dashboard"),
        ],
    )

import logging

from sqlalchemy.orm import Session

from app.core.config.settings import get_settings
from app.core.security.auth import get_password_hash
from app.models.user import User, RoleType

logger = logging.getLogger(__name__)

def init_db(db: Session) -> None:
    """Initialize database with required data"""
    settings = get_settings()

    # Create default admin if it doesn't exist
    existing_admin = db.query(User).filter(
        User.email == settings.DEFAULT_ADMIN_EMAIL,
        User.role == RoleType.ADMIN
    ).first()
    if not existing_admin:
        new_admin = User(
            name=settings.DEFAULT_ADMIN_NAME,
            email=settings.DEFAULT_ADMIN_EMAIL,
            role=RoleType.ADMIN,
            hashed_password=get_password_hash(settings.DEFAULT_ADMIN_PASSWORD)
        )
        db.add(new_admin)

    try:
        db.commit()
    except Exception as e:
        db.rollback()
        raise e

    if not existing_admin:
        logger.info("Created default admin account %s", settings.DEFAULT_ADMIN_EMAIL)

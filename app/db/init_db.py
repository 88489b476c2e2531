"""
Database bootstrap: initial admin account and default offboarding checklist
"""
import logging

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import hash_password
from app.models.department import Department
from app.models.enums import UserRole
from app.models.user import User
from app.services.offboarding_service import seed_task_templates

logger = logging.getLogger(__name__)

DEFAULT_DEPARTMENTS = ["Administration", "Human Resources", "Nursing", "Operations"]


def bootstrap_initial_admin(db: Session) -> bool:
    """
    Create the initial admin (and default departments) when no admin exists.

    Returns True when an admin was created.
    """
    if db.query(User.id).filter(User.role == UserRole.ADMIN).first():
        logger.info("Admin user already exists, skipping initial bootstrap")
        return False

    logger.info("No admin user found, creating initial admin setup...")
    for name in DEFAULT_DEPARTMENTS:
        if not db.query(Department.id).filter(Department.name == name).first():
            db.add(Department(name=name, active=True))
            logger.info("Created department: %s", name)
    db.flush()

    admin_dept = db.query(Department).filter(Department.name == "Administration").first()
    db.add(User(
        username=settings.INITIAL_ADMIN_USERNAME.strip().lower(),
        full_name="System Administrator",
        password_hash=hash_password(settings.INITIAL_ADMIN_PASSWORD),
        role=UserRole.ADMIN,
        department_id=admin_dept.id if admin_dept else None,
        active=True,
    ))
    logger.info("Initial admin user created: %s", settings.INITIAL_ADMIN_USERNAME)
    logger.info("Password: [set via INITIAL_ADMIN_PASSWORD environment variable]")
    return True


def init_db(db: Session) -> None:
    """Run every bootstrap step and commit once."""
    try:
        bootstrap_initial_admin(db)
        added = seed_task_templates(db)
        if added:
            logger.info("Seeded %s offboarding task templates", added)
        db.commit()
    except Exception:
        db.rollback()
        raise

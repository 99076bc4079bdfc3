"""
User provisioning. Accounts normally arrive from the identity service; this
helper exists for operator scripts and test fixtures.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from aurashift.core.clock import utcnow
from aurashift.models.user import User


def create_user(
    db: Session,
    email: str,
    display_name: str,
    created_at: Optional[datetime] = None,
) -> User:
    user = User(
        email=email.strip().lower(),
        display_name=display_name.strip(),
        created_at=created_at or utcnow(),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.strip().lower()).first()

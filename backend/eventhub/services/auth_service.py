"""Registration and login."""
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from eventhub.exceptions import AuthenticationFailed, DuplicateKey, InvalidInput
from eventhub.models.user import Role, User
from eventhub.schemas.user import TokenOut, UserOut
from eventhub.security.passwords import hash_password, verify_password
from eventhub.security.tokens import token_issuer

logger = logging.getLogger(__name__)


def email_exists(db: Session, email: str) -> bool:
    return db.query(User.user_id).filter(User.email == email).first() is not None


def register_user(
    db: Session,
    name: str,
    email: Optional[str],
    password: str,
    role: Optional[Role] = None,
) -> User:
    """Create a user with a bcrypt-hashed password. Emails are compared case-sensitively."""
    if email is None or not email.strip():
        raise InvalidInput("Email cannot be null or empty")
    if email_exists(db, email):
        raise DuplicateKey(f"Email is already in use: {email}")

    user = User(
        name=name,
        email=email,
        password_hash=hash_password(password),
        role=role or Role.user,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # lost a race with a concurrent registration for the same email
        db.rollback()
        raise DuplicateKey(f"Email is already in use: {email}")
    db.refresh(user)
    logger.info("Registered user %s with role %s", user.user_id, user.role.value)
    return user


def login(db: Session, email: str, password: str) -> TokenOut:
    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(password, user.password_hash):
        logger.warning("Failed login attempt for %s", email)
        raise AuthenticationFailed("Invalid email or password")

    token = token_issuer.issue(user.user_id)
    logger.info("User %s logged in", user.user_id)
    return TokenOut(token=token, user=UserOut.model_validate(user))

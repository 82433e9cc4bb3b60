# storefront/services/user_service.py
import jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.domain.errors import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from storefront.repos.user_repo import UserRepo
from storefront.services.blacklist_service import BlacklistService
from storefront.utils.logging import get_logger
from storefront.utils.security import (
    ACCESS,
    REFRESH,
    decode_token,
    hash_password,
    issue_token,
    password_is_strong,
    verify_password,
)

logger = get_logger(__name__)

WEAK_PASSWORD_MESSAGE = (
    "Invalid password format! Password should contain atleast one uppercase character, "
    "one number, one special character and length greater than 6 characters."
)


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)
        self.blacklist = BlacklistService(db)

    def register(self, username: str, password: str) -> UserModel:
        if self.repo.get_by_username(username):
            raise ConflictError("Username already exists!")

        if not password_is_strong(password):
            raise ValidationError(WEAK_PASSWORD_MESSAGE)

        user = UserModel(username=username, password_hash=hash_password(password))
        try:
            created = self.repo.create_user(user)
        except IntegrityError:
            self.repo.rollback()
            raise ConflictError("Username already exists!")

        logger.info(f"Registered user {created.id} ({username})")
        return created

    def login(self, username: str, password: str) -> dict:
        user = self.repo.get_by_username(username)
        if not user:
            raise NotFoundError("User not found")

        if not verify_password(password, user.password_hash):
            logger.info(f"Failed login for user {user.id}")
            raise UnauthorizedError("Invalid password")

        access_token = issue_token(user.id, ACCESS)
        logger.info(f"User {user.id} logged in")
        return {
            "token": access_token,
            "access_token": access_token,
            "refresh_token": issue_token(user.id, REFRESH),
        }

    def logout(self, token: str) -> None:
        self.blacklist.revoke(token)

    def refresh(self, refresh_token: str) -> dict:
        try:
            claims = decode_token(refresh_token, REFRESH)
        except jwt.InvalidTokenError:
            raise UnauthorizedError("Invalid refresh token")

        if self.blacklist.is_revoked(refresh_token):
            raise UnauthorizedError("Invalid refresh token")

        return {"access_token": issue_token(claims["userId"], ACCESS)}

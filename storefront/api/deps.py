# storefront/api/deps.py
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from storefront.api.errors import http_error
from storefront.data.database import get_db
from storefront.domain.errors import UnauthorizedError
from storefront.services.auth_service import AuthService

# auto_error off: a missing header has to answer 401 {"error"}, not 403
bearer = HTTPBearer(auto_error=False)


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: Session = Depends(get_db),
) -> str:
    token = credentials.credentials if credentials else None
    try:
        return AuthService(db).authenticate(token)
    except UnauthorizedError as e:
        raise http_error(e)

# storefront/api/routers/users.py
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from storefront.api.errors import http_error
from storefront.data.database import get_db
from storefront.domain.errors import ConflictError, StorefrontError, ValidationError
from storefront.domain.schemas import (
    AccessTokenOut,
    CredentialsIn,
    LoginOut,
    LogoutIn,
    MessageOut,
    RefreshIn,
)
from storefront.services.user_service import UserService
from storefront.utils.settings import STRICT_PASSWORD_ERRORS

router = APIRouter(tags=["users"])


def get_service(db: Session):
    return UserService(db)


@router.post("/register", response_model=MessageOut)
def register(payload: CredentialsIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        svc.register(payload.username, payload.password)
    except ConflictError as e:
        return JSONResponse(status_code=400, content={"msg": str(e)})
    except ValidationError as e:
        # legacy clients read weak-password errors from a 200
        return JSONResponse(status_code=400 if STRICT_PASSWORD_ERRORS else 200, content={"msg": str(e)})
    return {"message": "User registered successfully"}


@router.post("/login", response_model=LoginOut)
def login(payload: CredentialsIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.login(payload.username, payload.password)
    except StorefrontError as e:
        raise http_error(e)


@router.post("/logout", response_model=MessageOut)
def logout(payload: LogoutIn, db: Session = Depends(get_db)):
    get_service(db).logout(payload.token)
    return {"message": "Logout successful"}


@router.post("/refresh", response_model=AccessTokenOut)
def refresh(payload: RefreshIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.refresh(payload.refresh_token)
    except StorefrontError as e:
        raise http_error(e)

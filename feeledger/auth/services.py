import logging
from uuid import UUID

from fastapi import status
from sqlalchemy.ext.asyncio import AsyncSession

from feeledger.auth.schemas import AccountInfo, ChangePasswordRequest, LoginRequest, LoginResponse
from feeledger.auth.security import create_access_token, hash_password, verify_password
from feeledger.core.exceptions import NotFoundError, ServiceError
from feeledger.db.stores import AccountStore

logger = logging.getLogger(__name__)


async def login_user(db: AsyncSession, payload: LoginRequest) -> LoginResponse:
    # Find account by email (case-insensitive)
    user = await AccountStore(db).find_by_email(payload.email)
    if not user or not verify_password(payload.password, user.password_hash):
        raise ServiceError("Invalid email or password", status.HTTP_401_UNAUTHORIZED)

    access_token = create_access_token(
        subject={"sub": str(user.id), "role": user.role},
    )
    logger.info("Account %s logged in as %s", user.id, user.role)
    return LoginResponse(
        message="Login successful",
        access_token=access_token,
        user=AccountInfo.model_validate(user),
    )


async def get_account(db: AsyncSession, account_id: UUID) -> AccountInfo:
    user = await AccountStore(db).find_by_id(account_id)
    if not user:
        raise NotFoundError("User not found")
    return AccountInfo.model_validate(user)


async def change_password(db: AsyncSession, account_id: UUID, payload: ChangePasswordRequest) -> None:
    accounts = AccountStore(db)
    user = await accounts.find_by_id(account_id)
    if not user:
        raise NotFoundError("User not found")
    if not verify_password(payload.current_password, user.password_hash):
        raise ServiceError("Current password is incorrect", status.HTTP_400_BAD_REQUEST)
    await accounts.update_fields(user, {"password_hash": hash_password(payload.new_password)})
    await db.commit()
    logger.info("Password changed for account %s", account_id)

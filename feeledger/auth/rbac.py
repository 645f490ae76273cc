from fastapi import Depends, HTTPException, status

from feeledger.auth.dependencies import get_current_user
from feeledger.auth.schemas import CurrentUser
from feeledger.core.enums import AccountRole


def require_role(role: AccountRole):
    """
    Dependency factory restricting a router or endpoint to one role.

    Example:
        APIRouter(dependencies=[Depends(require_role(AccountRole.admin))])
    """

    async def _checker(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if current_user.role != role:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. {role.value.capitalize()} only.",
            )
        return current_user

    return _checker

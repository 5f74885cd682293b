"""
User management endpoints (admin), plus self-read for every role.
"""

from fastapi import APIRouter, Depends, Path, Query

from servicedesk.enums import Role, UserStatus
from servicedesk.models import User
from servicedesk.security import Operation
from servicedesk.services import AccountService

from ..auth.dependencies import get_account_service, require, valid_user_id
from ..schemas import ApiResponse, UserResponse, UserUpdateRequest, envelope

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=ApiResponse[list[UserResponse]], response_model_exclude_unset=True)
def list_users(
    role: Role | None = Query(None),
    status: UserStatus | None = Query(None),
    search: str | None = Query(None, max_length=100),
    current_user: User = Depends(require(Operation.USER_LIST)),
    accounts: AccountService = Depends(get_account_service),
):
    users = accounts.list_users(role=role, status=status, search=search)
    return envelope([UserResponse.model_validate(user) for user in users], count=len(users))


@router.get("/role/{role}", response_model=ApiResponse[list[UserResponse]], response_model_exclude_unset=True)
def list_users_by_role(
    current_user: User = Depends(require(Operation.USER_LIST)),
    role: str = Path(...),
    accounts: AccountService = Depends(get_account_service),
):
    """Users with a given role, e.g. the technician picker in the assign dialog."""
    users = accounts.list_by_role(role)
    return envelope([UserResponse.model_validate(user) for user in users], count=len(users))


@router.get("/{user_id}", response_model=ApiResponse[UserResponse], response_model_exclude_unset=True)
def get_user(
    current_user: User = Depends(require(Operation.USER_READ)),
    user_id: str = Depends(valid_user_id),
    accounts: AccountService = Depends(get_account_service),
):
    return envelope(UserResponse.model_validate(accounts.get_user(user_id, current_user)))


@router.put("/{user_id}", response_model=ApiResponse[UserResponse], response_model_exclude_unset=True)
def update_user(
    payload: UserUpdateRequest,
    current_user: User = Depends(require(Operation.USER_UPDATE)),
    user_id: str = Depends(valid_user_id),
    accounts: AccountService = Depends(get_account_service),
):
    user = accounts.update_user(user_id, payload.model_dump(exclude_unset=True))
    return envelope(UserResponse.model_validate(user), message="User updated successfully")


@router.delete("/{user_id}", response_model=ApiResponse[None], response_model_exclude_unset=True)
def delete_user(
    current_user: User = Depends(require(Operation.USER_DELETE)),
    user_id: str = Depends(valid_user_id),
    accounts: AccountService = Depends(get_account_service),
):
    accounts.delete_user(user_id, current_user)
    return envelope(message="User deleted successfully")

from fastapi import APIRouter, Depends

from ..errors import credential_error_to_http
from ..schemas import SuccessResponse, UserUpdateRequest, UserRemoveRequest
from ..deps import get_credential_store
from ...services.credential_store import CredentialStore

router = APIRouter(prefix="/user", tags=["user"])


@router.put("", response_model=SuccessResponse[dict])
async def update_user(
    request: UserUpdateRequest,
    store: CredentialStore = Depends(get_credential_store)
):
    """Create a user, or update its password and admin flag with modify=true"""
    ok, error = await store.update(
        request.username,
        request.password,
        admin=request.admin,
        modify=request.modify
    )
    if not ok:
        raise credential_error_to_http(error)

    return SuccessResponse(
        message="update successfully",
        data={"username": request.username}
    )


@router.delete("", response_model=SuccessResponse[dict])
async def remove_user(
    request: UserRemoveRequest,
    store: CredentialStore = Depends(get_credential_store)
):
    """Remove a user and everything stored under it"""
    ok, error = await store.remove(request.username)
    if not ok:
        raise credential_error_to_http(error)

    return SuccessResponse(
        message="remove successfully",
        data={"username": request.username}
    )

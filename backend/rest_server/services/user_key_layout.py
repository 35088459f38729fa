"""
Key layout of a user record in the hierarchical store:

    users/                  namespace root
    users/<name>            user directory, exists iff the user exists
    users/<name>/passwd     derived password hash
    users/<name>/admin      "true" / "false", only when set explicitly
"""

from typing import Optional

from ..core.exceptions import InvalidUsernameError

STORAGE_ROOT = "users"
PATH_SEPARATORS = ("/", "\\")
# read as URL syntax once the name is joined into a keys URL
URL_RESERVED = ("%", "?", "#")


def validate_username(username: Optional[str]) -> str:
    if not username:
        raise InvalidUsernameError(username, "username must not be empty")
    if any(sep in username for sep in PATH_SEPARATORS):
        raise InvalidUsernameError(username, "username must not contain path separators")
    if any(ch in username for ch in URL_RESERVED):
        raise InvalidUsernameError(username, "username must not contain %, ? or #")
    if any(ord(ch) < 32 or ord(ch) == 127 for ch in username):
        raise InvalidUsernameError(username, "username must not contain control characters")
    if username in (".", ".."):
        raise InvalidUsernameError(username, "username must not be a relative path")
    return username


def storage_path() -> str:
    return f"{STORAGE_ROOT}/"


def user_path(username: str) -> str:
    return f"{STORAGE_ROOT}/{validate_username(username)}"


def user_passwd_path(username: str) -> str:
    return f"{user_path(username)}/passwd"


def user_admin_path(username: str) -> str:
    return f"{user_path(username)}/admin"


def username_from_key(key: str) -> str:
    """Map a node key such as ``/users/alice`` back to ``alice``"""
    return key.rstrip("/").rsplit("/", 1)[-1]

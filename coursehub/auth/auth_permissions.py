from fastapi import HTTPException, Depends

from coursehub.auth.auth_utils import verify_token


class UserContext:
    """
    Identity decoded from the bearer token
    """
    def __init__(self, payload: dict):
        self.user_id = payload.get("sub")
        self.email = payload.get("email")
        self.is_admin = bool(payload.get("is_admin", False))
        self.payload = payload


async def get_current_user(payload: dict = Depends(verify_token)) -> UserContext:
    """
    Dependency: authenticated caller

    Raises:
        401: Missing, invalid or expired token
    """
    if not payload.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid token: missing user id")
    return UserContext(payload)


async def require_admin(user: UserContext = Depends(get_current_user)) -> UserContext:
    """
    Dependency: authenticated caller with the admin flag

    Raises:
        401: Not authenticated
        403: Not an admin
    """
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Access denied. Admin privileges required.")
    return user

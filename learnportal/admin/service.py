from learnportal.errors import ForbiddenError, NotFoundError
from learnportal.storage.cache import PROGRESS, USERS
from learnportal.store import PortalStore
from learnportal.users.service import public_user


def require_admin_key(store: PortalStore, key):
    """Exact match against the configured secret. An unset secret admits nobody."""
    secret = store.config.admin_key
    if not secret or key != secret:
        raise ForbiddenError("Forbidden")


def list_users(store: PortalStore, key) -> dict:
    require_admin_key(store, key)
    users = [public_user(user) for user in store.cache.get(USERS).values()]
    return {"success": True, "users": users}


def delete_user(store: PortalStore, email: str, key) -> dict:
    require_admin_key(store, key)

    users = store.cache.get(USERS)
    if email not in users:
        raise NotFoundError("User not found")

    del users[email]
    store.cache.get(PROGRESS).pop(email, None)

    store.cache.mark_dirty(USERS)
    store.cache.mark_dirty(PROGRESS)
    return {"success": True, "message": "User deleted"}

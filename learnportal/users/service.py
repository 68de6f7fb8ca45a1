from typing import Optional
import hashlib
import hmac
import json
import secrets

from learnportal.errors import NotFoundError
from learnportal.storage.cache import PROGRESS, USERS
from learnportal.store import PortalStore

HASH_PREFIX = "pbkdf2_sha256"
HASH_ITERATIONS = 200_000

MODULES = ("word", "excel", "ppt")


def zeroed_progress() -> dict:
    return {name: 0 for name in MODULES}


# ==================== PASSWORDS ====================

def hash_password(password: str, salt: Optional[str] = None) -> str:
    """Salted PBKDF2 hash in the form `pbkdf2_sha256$<iterations>$<salt>$<hex>`"""
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), HASH_ITERATIONS)
    return f"{HASH_PREFIX}${HASH_ITERATIONS}${salt}${digest.hex()}"


def is_hashed(stored) -> bool:
    return isinstance(stored, str) and stored.startswith(HASH_PREFIX + "$")


def verify_password(stored, supplied) -> bool:
    """
    Check a supplied password against the stored value.
    Records written before hashing was enabled hold plaintext and use exact equality.
    """
    if not is_hashed(stored):
        return stored == supplied
    if not isinstance(supplied, str):
        return False

    _, iterations, salt, expected = stored.split("$", 3)
    digest = hashlib.pbkdf2_hmac("sha256", supplied.encode(), salt.encode(), int(iterations))
    return hmac.compare_digest(digest.hex(), expected)


def public_user(user: dict) -> dict:
    return {key: value for key, value in user.items() if key != "password"}


def account_key(email) -> str:
    """
    Map key for an email as sent. Non-string values use their JSON text,
    which is also the key they get once the map is written to disk.
    """
    return email if isinstance(email, str) else json.dumps(email)


# ==================== ACCOUNTS ====================

def signup(store: PortalStore, data: dict) -> dict:
    users = store.cache.get(USERS)
    email = data.get("email")
    key = account_key(email)

    if key in users:
        return {"success": False, "message": "Email already registered"}

    password = data.get("password")
    # only string passwords are hashed; anything else is stored as sent
    if store.config.hash_passwords and isinstance(password, str):
        password = hash_password(password)

    users[key] = {
        "fullname": data.get("fullname"),
        "email": email,
        "phone": data.get("phone"),
        "country": data.get("country"),
        "idcard": data.get("idcard"),
        "password": password,
    }
    store.cache.get(PROGRESS)[key] = zeroed_progress()

    store.cache.mark_dirty(USERS)
    store.cache.mark_dirty(PROGRESS)
    return {"success": True, "message": "Registration successful"}


def signin(store: PortalStore, email, password) -> dict:
    user = store.cache.get(USERS).get(account_key(email))
    if not user or not verify_password(user.get("password"), password):
        return {"success": False, "message": "Invalid credentials"}

    # Hashes never leave the server; plaintext mode returns the record as stored
    returned = public_user(user) if store.config.hash_passwords else dict(user)
    return {"success": True, "message": "Login successful", "user": returned}


# ==================== PROGRESS ====================

def get_progress(store: PortalStore, email: str) -> dict:
    progress = store.cache.get(PROGRESS).get(email)
    if not progress:
        raise NotFoundError("Progress not found for this user")
    return progress


def update_progress(store: PortalStore, email: str, updates: dict) -> dict:
    progress = store.cache.get(PROGRESS)
    current = progress.get(email) or zeroed_progress()

    progress[email] = {
        name: updates[name] if updates.get(name) is not None else current.get(name, 0)
        for name in MODULES
    }

    store.cache.mark_dirty(PROGRESS)
    return {"success": True, "message": "Progress updated"}

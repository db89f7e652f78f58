from __future__ import annotations

from typing import Any

import bcrypt

_users: dict[str, dict[str, Any]] = {}

# Demo accounts: (username, password, role, display name)
_DEMO_USERS = [
    ("user", "user123", "user", "Demo User"),
    ("alice", "alice123", "user", "Alice"),
    ("bob", "bob123", "user", "Bob"),
    ("admin", "admin123", "admin", "Admin"),
]


def _hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt()).decode()


def _verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def register_user(username: str, password: str, role: str = "user", display_name: str | None = None) -> None:
    if username in _users:
        raise ValueError(f"User already exists: {username}")
    _users[username] = {
        "password_hash": _hash_password(password),
        "role": role,
        "display_name": display_name or username,
    }


def user_exists(username: str) -> bool:
    return username in _users


def authenticate(username: str, password: str) -> dict[str, Any] | None:
    """Verify credentials. Returns ``{username, role, display_name}`` or ``None``."""
    record = _users.get(username)
    if record and _verify_password(password, record["password_hash"]):
        return {"username": username, "role": record["role"], "display_name": record["display_name"]}
    return None


for _name, _password, _role, _display in _DEMO_USERS:
    register_user(_name, _password, _role, _display)

# backend/models/users.py
from dataclasses import dataclass
from typing import Dict, Optional


# Represents an operator account with its system role
@dataclass(frozen=True)
class User:
    id: str
    username: str
    role: str  # "admin" or "cashier"


# Fixed credential table: username -> (password, user)
ACCOUNTS: Dict[str, tuple] = {
    "admin": ("admin", User(id="u1", username="admin", role="admin")),
    "cashier": ("1234", User(id="u2", username="cashier", role="cashier")),
}


def authenticate(username: str, password: str) -> Optional[User]:
    account = ACCOUNTS.get(username)
    if not account or account[0] != password:
        return None
    return account[1]


def get_user(username: str) -> Optional[User]:
    account = ACCOUNTS.get(username)
    return account[1] if account else None

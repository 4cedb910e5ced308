#!/usr/bin/env python3
"""
sensorboard AuthService (server-side authentication helpers)

Responsibilities (authN only):
- Derive the password hash the credential table stores
  (PBKDF2-HMAC, SHA3-512, application-wide salt, fixed iteration count)
- Check a username + derived hash against the configured users

Notes:
- Session handling lives in the FastAPI layer (api/dependencies.py).
- Derived hashes are never logged or returned to the client.
"""

import argparse
import getpass
import logging
from secrets import compare_digest
from typing import Dict, Optional

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

logger = logging.getLogger("sensorboard.server.auth")

DEFAULT_SALT = "sůl"
DEFAULT_ITERATIONS = 1000


def derive_password_hash(password: str, salt: str = DEFAULT_SALT, iterations: int = DEFAULT_ITERATIONS) -> str:
    """PBKDF2-HMAC-SHA3-512 of `password`, full digest length, lowercase hex."""
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA3_512(),
        length=hashes.SHA3_512.digest_size,
        salt=salt.encode("utf-8"),
        iterations=iterations,
    )
    return kdf.derive(password.encode("utf-8")).hex()


class AuthService:
    def __init__(self, users: Dict[str, str], *, salt: str = DEFAULT_SALT,
                 iterations: int = DEFAULT_ITERATIONS) -> None:
        self.users = {name: h.lower() for name, h in users.items()}
        self.salt = salt
        self.iterations = int(iterations)

    def hash_password(self, password: str) -> str:
        return derive_password_hash(password, self.salt, self.iterations)

    def login(self, username: str, password_hash: str) -> bool:
        """Check a username against an already derived password hash."""
        expected: Optional[str] = self.users.get(username)
        if expected is None:
            # Compare anyway so unknown users take the same time
            compare_digest(password_hash, password_hash)
            return False
        return compare_digest(password_hash.lower(), expected)

    def authenticate(self, username: str, password: str) -> bool:
        """Derive the hash once and check it."""
        if not username or not password:
            return False
        return self.login(username, self.hash_password(password))


if __name__ == "__main__":
    # Utility: print a password hash for the `users` section of the config
    parser = argparse.ArgumentParser(description="Derive a sensorboard password hash")
    parser.add_argument("--salt", default=DEFAULT_SALT)
    parser.add_argument("--iterations", type=int, default=DEFAULT_ITERATIONS)
    args = parser.parse_args()
    print(derive_password_hash(getpass.getpass("Password: "), args.salt, args.iterations))

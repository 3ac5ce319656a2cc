"""Credential hashing with bcrypt."""

import bcrypt

BCRYPT_ROUNDS = 10

# bcrypt only reads this many bytes of input; newer releases reject longer ones
MAX_PASSWORD_BYTES = 72


class BcryptPasswordHasher:
    """One-way salted hashing of password secrets.

    `rounds` is the bcrypt work factor (2^rounds iterations). 10 keeps
    interactive login well under a second.
    """

    def __init__(self, rounds: int = BCRYPT_ROUNDS):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, hashed: str | None) -> bool:
        """Constant-time check of a password against a stored hash."""
        if not hashed:
            return False
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            # Stored value is not a bcrypt hash
            return False

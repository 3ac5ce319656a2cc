from typing import Protocol
from domain.model.user import User


class UserRepository(Protocol):
    """Protocol defining the interface for user data access.

    Implementations raise StorageUnavailableError when the backing store
    cannot be reached, so a missing user (None) is never confused with an
    outage.
    """
    def create(
        self,
        name: str,
        email: str,
        password_hash: str | None = None,
        federated_id: str | None = None,
        avatar_url: str | None = None,
    ) -> User:
        """Create a new user. Raise DuplicateEmailError if the email is taken."""
        ...

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        ...

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        ...

    def update(self, user_id: str, fields: dict[str, str]) -> User | None:
        """Fill in fields that are currently absent. Return the updated User.

        Populated fields are left untouched. Return None if no such user.
        """
        ...

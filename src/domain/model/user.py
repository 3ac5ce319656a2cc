from dataclasses import dataclass
from datetime import datetime

# Optional profile fields that federated login may fill in when absent.
ENRICHABLE_FIELDS = ('name', 'avatar_url', 'federated_id')


def normalize_email(email: str | None) -> str:
    """Canonical form used for every Directory lookup and write."""
    return (email or '').strip().lower()


@dataclass(frozen=True)
class PublicUser:
    """The only view of a User that leaves the auth core."""
    id: str
    name: str
    email: str
    avatar_url: str | None = None

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'avatarUrl': self.avatar_url,
        }


@dataclass
class User:
    """Domain model representing a user."""
    id: str
    name: str
    email: str
    created_at: datetime
    updated_at: datetime
    password_hash: str | None = None
    federated_id: str | None = None
    avatar_url: str | None = None

    @property
    def provider(self) -> str:
        if self.password_hash and self.federated_id:
            return 'email+google'
        if self.federated_id:
            return 'google'
        return 'email'

    @property
    def has_password(self) -> bool:
        return bool(self.password_hash)

    def to_public(self) -> PublicUser:
        return PublicUser(
            id=self.id,
            name=self.name,
            email=self.email,
            avatar_url=self.avatar_url,
        )

    def enrichment(self, **candidates: str | None) -> dict[str, str]:
        """Return the subset of candidates that would fill an absent field.

        Populated fields are never part of the patch, so applying it twice
        is a no-op.
        """
        patch = {}
        for key, value in candidates.items():
            if key not in ENRICHABLE_FIELDS:
                raise ValueError(f"Field cannot be enriched: {key}")
            if value and not getattr(self, key):
                patch[key] = value
        return patch

"""In-memory implementation of UserRepository for testing."""

import threading
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from domain.model.errors import DuplicateEmailError
from domain.model.user import ENRICHABLE_FIELDS, User, normalize_email


class FakeUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}
        self.writes: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    # ── write operations ─────────────────────────────────────

    def create(
        self,
        name: str,
        email: str,
        password_hash: str | None = None,
        federated_id: str | None = None,
        avatar_url: str | None = None,
    ) -> User:
        email = normalize_email(email)
        with self._lock:
            if any(u.email == email for u in self.store.values()):
                raise DuplicateEmailError()

            now = datetime.now(timezone.utc)
            user = User(
                id=uuid.uuid4().hex,
                name=name,
                email=email,
                created_at=now,
                updated_at=now,
                password_hash=password_hash or None,
                federated_id=federated_id or None,
                avatar_url=avatar_url or None,
            )
            self.store[user.id] = user
            self.writes.append(('create', user.id))
            return replace(user)

    def update(self, user_id: str, fields: dict[str, str]) -> User | None:
        unknown = set(fields) - set(ENRICHABLE_FIELDS)
        if unknown:
            raise ValueError(f"Fields cannot be updated: {sorted(unknown)}")

        with self._lock:
            user = self.store.get(user_id)
            if not user:
                return None
            for field, value in fields.items():
                if value and not getattr(user, field):
                    setattr(user, field, value)
                    user.updated_at = datetime.now(timezone.utc)
            self.writes.append(('update', user_id))
            return replace(user)

    # ── read operations ──────────────────────────────────────

    def get_by_email(self, email: str) -> User | None:
        email = normalize_email(email)
        for user in self.store.values():
            if user.email == email:
                return replace(user)
        return None

    def get_by_id(self, user_id: str) -> User | None:
        user = self.store.get(user_id)
        return replace(user) if user else None

"""Authenticator port: one capability, several credential kinds."""

from typing import Protocol, TypeVar

from domain.model.user import User

RequestT = TypeVar('RequestT', contravariant=True)


class Authenticator(Protocol[RequestT]):
    """Resolve the User behind a credential-bearing request or raise a DomainError."""

    async def resolve_identity(self, request: RequestT) -> User: ...

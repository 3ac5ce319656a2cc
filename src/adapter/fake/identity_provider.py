"""In-memory implementation of IdentityProviderPort for testing."""

from domain.model.errors import InvalidAssertionError
from domain.model.session import FederatedIdentity


class FakeIdentityProvider:
    """Accepts only assertions registered up front."""

    def __init__(self, identities: dict[str, FederatedIdentity] | None = None):
        self.identities = dict(identities or {})
        self.calls: list[str] = []

    def register(self, assertion: str, identity: FederatedIdentity) -> None:
        self.identities[assertion] = identity

    async def verify_assertion(self, assertion: str) -> FederatedIdentity:
        self.calls.append(assertion)
        identity = self.identities.get(assertion)
        if identity is None:
            raise InvalidAssertionError("Unknown assertion")
        return identity

"""Identity provider port: outbound interface for federated assertion checks."""

from typing import Protocol

from domain.model.session import FederatedIdentity


class IdentityProviderPort(Protocol):
    """Port for verifying identity assertions issued by an external provider."""

    async def verify_assertion(self, assertion: str) -> FederatedIdentity:
        """Verify signature, audience, issuer and expiry of an assertion.

        Raises:
            InvalidAssertionError: on any verification or transport failure.
        """
        ...

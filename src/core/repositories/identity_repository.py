"""Abstract contract for the authentication collaborator."""

from abc import ABC, abstractmethod

from core.models.media import Principal, Session


class IdentityRepository(ABC):
    """Resolves the caller's session and principal.

    The pipeline never issues sessions; it only checks that one exists.
    """

    @abstractmethod
    def get_session(self) -> Session:
        """Return the active session.

        Raises:
            AuthenticationError: If there is no valid session
        """

    @abstractmethod
    def get_current_user(self) -> Principal | None:
        """Return the authenticated principal, or None if unresolvable."""

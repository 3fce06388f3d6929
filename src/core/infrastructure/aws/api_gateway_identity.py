"""Identity resolved from the API Gateway authorizer context."""

import time
from collections.abc import Mapping
from typing import Any

from aws_lambda_powertools import Logger

from core.models.errors import AuthenticationError
from core.models.media import Principal, Session
from core.repositories.identity_repository import IdentityRepository

logger = Logger(UTC=True)


class ApiGatewayIdentity(IdentityRepository):
    """Reads the caller verified by a Cognito or Lambda authorizer.

    API Gateway only invokes the function after the authorizer accepted the
    token, so the presence of the authorizer context is the session check.
    """

    def __init__(self, event: Mapping[str, Any]) -> None:
        request_context = event.get("requestContext") or {}
        self._authorizer: Mapping[str, Any] = request_context.get("authorizer") or {}

    def _claims(self) -> Mapping[str, Any]:
        claims = self._authorizer.get("claims")
        if isinstance(claims, Mapping):
            return claims

        # HTTP API JWT authorizers nest claims under "jwt"
        jwt = self._authorizer.get("jwt")
        if isinstance(jwt, Mapping) and isinstance(jwt.get("claims"), Mapping):
            return jwt["claims"]

        return {}

    def get_session(self) -> Session:
        if not self._authorizer:
            raise AuthenticationError(message="Missing authorizer context")

        claims = self._claims()
        subject = claims.get("sub") or self._authorizer.get("principalId")
        if not subject:
            raise AuthenticationError(message="Authorizer context has no subject")

        expires_at = int(claims["exp"]) if claims.get("exp") is not None else None
        if expires_at is not None and expires_at <= int(time.time()):
            raise AuthenticationError(message="Session expired", details={"exp": expires_at})

        return Session(subject=str(subject), expires_at=expires_at)

    def get_current_user(self) -> Principal | None:
        claims = self._claims()
        subject = claims.get("sub") or self._authorizer.get("principalId")
        if not subject:
            logger.debug("No principal in authorizer context")
            return None

        email = claims.get("email")
        return Principal(id=str(subject), email=str(email) if email else None)

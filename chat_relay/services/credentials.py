"""Credential lookup by named reference into process configuration state."""

import logging
from typing import Mapping, Protocol


logger = logging.getLogger(__name__)


class CredentialStore(Protocol):
    def resolve(self, credential_ref: str) -> str | None:
        """Return the secret for a reference, or None when it is absent."""


class EnvironmentCredentialStore:
    """Resolves credential references against an environment-style mapping."""

    def __init__(self, environ: Mapping[str, str]) -> None:
        self._environ = environ

    def resolve(self, credential_ref: str) -> str | None:
        value = self._environ.get(credential_ref)
        if value is None or value.strip() == "":
            logger.debug("credential_unresolved credential_ref=%s", credential_ref)
            return None
        return value.strip()

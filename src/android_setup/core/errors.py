"""Fatal errors of the provisioning pipeline.

Collaborators report failure through return values (`HttpResult`,
`ProcessOutcome`); the pipeline inspects them right after each call and raises
one of these. The CLI is the only layer that turns them into an exit status.
"""

from __future__ import annotations

EXIT_FATAL = 1
EXIT_BAD_CLI_ARGS = 2


class ProvisioningError(Exception):
    """Unrecoverable failure: the run stops, completed steps are kept."""

    exit_code = EXIT_FATAL

    def __init__(self, message: str, *, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}\n{self.detail}"
        return self.message


class DownloadError(ProvisioningError):
    """Non-200 response, transport failure or unexpected payload type."""


class ProcessFailedError(ProvisioningError):
    """An external tool wrote to its error stream (or could not be started)."""


class MissingArtifactError(ProvisioningError):
    """A file required by a later step is absent."""


class CatalogError(ProvisioningError):
    """The emulator catalog could not be parsed or validated."""

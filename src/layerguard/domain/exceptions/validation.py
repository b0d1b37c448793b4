"""Configuration validation exceptions."""

from layerguard.domain.exceptions.base import LayerGuardError


class ConfigurationError(LayerGuardError):
    """Error in linter or rule configuration.

    Raised at engine construction, before any file is processed.
    FAIL-FIRST: validates inputs immediately.

    Attributes:
        subject: Rule id or config section that is invalid (must not be empty)
        reason: Why it is invalid (must not be empty)
    """

    def __init__(self, subject: str, reason: str) -> None:
        # FAIL-FIRST validation
        if not subject:
            raise ValueError("subject must not be empty")
        if not reason:
            raise ValueError("reason must not be empty")

        self.subject = subject
        self.reason = reason
        super().__init__(f"Invalid configuration '{subject}': {reason}")

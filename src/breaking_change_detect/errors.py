"""Exceptions raised while loading and comparing API documents."""


class BreakingChangeError(Exception):
    """Base exception for breaking-change-detect errors."""
    pass


class FetchError(BreakingChangeError):
    """Raised when a document cannot be retrieved from its source."""
    def __init__(self, locator: str, reason: str, status_code: int | None = None):
        super().__init__(f"Failed to fetch the specification from {locator}: {reason}")
        self.locator = locator
        self.reason = reason
        self.status_code = status_code


class ParseError(BreakingChangeError):
    """Raised when a document is not a well-formed OpenAPI 3 description."""
    def __init__(self, message: str, source: str | None = None):
        super().__init__(f"{source}: {message}" if source else message)
        self.message = message
        self.source = source


class UnresolvedSchemaReference(BreakingChangeError):
    """Raised when a $ref does not match any component schema."""
    def __init__(self, ref: str):
        super().__init__(f"Unresolved schema reference: {ref}")
        self.ref = ref

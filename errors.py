"""Error taxonomy for Casa.

Services raise these; the CLI entry point reports them to the user.
"""


class CasaError(Exception):
    """Base exception for all Casa errors."""

    pass


class ValidationError(CasaError, ValueError):
    """Malformed or out-of-range input (negative amount, start > end, ...)."""

    def __init__(self, message: str, field: str = None):
        self.field = field
        super().__init__(message)


class NotFoundError(CasaError):
    """Operation on a record that does not exist."""

    def __init__(self, entity: str, key):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} {key} not found")


class ConflictError(CasaError):
    """A write lost a race or hit a store constraint it could not resolve."""

    pass


class UpstreamUnavailable(CasaError):
    """The LLM provider (exchange rates, document extraction) is unreachable."""

    pass

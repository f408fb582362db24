"""Exception types surfaced by the pace engine."""


class ShadowRaceError(Exception):
    """Base class for engine errors."""


class AuthenticationError(ShadowRaceError):
    """Caller is not an authorised principal for the operation."""


class PersistenceError(ShadowRaceError):
    """A read or write against the storage layer failed."""

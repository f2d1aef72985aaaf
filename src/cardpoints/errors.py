class RewardEngineError(Exception):
    pass


class ValidationError(RewardEngineError, ValueError):
    """Caller supplied rule data that cannot be stored."""


class PresetNotFoundError(ValidationError):
    pass


class AuthenticationError(RewardEngineError):
    """A rule mutation was attempted without an authenticated caller."""


class PersistenceError(RewardEngineError):
    """The storage backend failed, or a write affected zero rows."""

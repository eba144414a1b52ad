class ConfigurationError(ValueError):
    """Missing, unknown or unparsable configuration key or value."""


class InputShapeError(ValueError):
    """Point set that cannot be turned into an [n, d] coordinate tensor."""


class PreconditionError(ValueError):
    """Move generator configured for a tour too short for its positions."""

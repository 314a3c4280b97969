class DigEvoError(Exception):
    """Base for all digevo exceptions."""

    pass


class InvalidStateError(DigEvoError):
    """Operation requested on a simulation state that cannot support it."""

    pass


class MultipleParentsUnsupportedError(InvalidStateError):
    """Lineage extraction reached an organism with more than one parent."""

    pass


class ConfigurationError(DigEvoError):
    """Invalid or inconsistent configuration."""

    pass


class FormatError(DigEvoError):
    """Corrupt or truncated persisted lineage."""

    pass

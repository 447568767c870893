"""Exception hierarchy for the Herald runtime."""


class HeraldError(Exception):
    """Base class for errors raised by Herald."""


class ConfigurationError(HeraldError):
    """Raised when a robot cannot be configured or built.

    Covers a missing configurator callback, an unknown adapter key and
    configuration files that fail to load. It aborts the call that raised
    it and leaves previously added robots untouched.
    """


class FrozenConfigError(ConfigurationError):
    """Raised when a config is mutated after a robot was built from it."""

"""Exceptions raised by FM Career."""


class FMCareerError(Exception):
    """Base class for project errors."""


class ConfigError(FMCareerError):
    """A balance or settings file could not be loaded or validated."""

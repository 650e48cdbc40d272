"""
Custom exceptions used by the cue optimizer and its browser collaborators.

Expected outcomes of the search (a chain that does not match, no selector at
all) are reported as `None`, never raised. These exceptions cover misuse and
environment failures only.
"""


class CueOptimizerError(Exception):
    """Base exception for all optimizer-related errors."""

    pass


class ConfigurationError(CueOptimizerError):
    """Invalid optimizer bounds or an unreadable configuration file."""

    pass


class SelectorCompilationError(CueOptimizerError):
    """A collection of cues could not be compiled into selector parts."""

    pass


class BrowserLaunchError(CueOptimizerError):
    """The requested browser could not be launched."""

    pass


class ElementNotFoundError(CueOptimizerError):
    """The target element could not be found on the page."""

    pass

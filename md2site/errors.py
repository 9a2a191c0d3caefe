"""
Exception types raised by the site builder.

Core modules raise these; only the CLI in ``build.py`` turns them into an
error message and a non-zero exit status.
"""


class SiteBuildError(Exception):
    """Base class for every fatal build error."""


class ConfigError(SiteBuildError):
    """The site configuration is missing a field or has a malformed one."""


class NavigationError(ConfigError):
    """A navigation entry cannot be turned into a usable link."""


class BuildError(SiteBuildError):
    """The content tree or output location cannot be built as requested."""

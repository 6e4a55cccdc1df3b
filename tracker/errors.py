# =============================================================================
# POLYMARKET WINDOW TRACKER
# Module: tracker/errors.py
# Purpose: Fatal setup errors
# =============================================================================
#
# Only environment/setup problems are fatal, and only before the loop
# starts. Everything inside the loop is recovered locally.
#
# =============================================================================


class TrackerSetupError(Exception):
    """Base class for errors that stop the tracker before it starts."""


class ConfigError(TrackerSetupError):
    """Invalid configuration value or file."""


class CollaboratorNotFoundError(TrackerSetupError):
    """The Polymarket CLI is missing or cannot be executed."""


class UnsupportedPlatformError(TrackerSetupError):
    """No collaborator build exists for this OS/architecture."""

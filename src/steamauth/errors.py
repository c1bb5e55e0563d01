from __future__ import annotations


class SteamAuthError(Exception):
    """Base class for every error raised by steamauth."""


class ConfigurationError(SteamAuthError):
    pass


class MissingCredential(ConfigurationError):
    """Steam API key/secret is absent or empty."""


class InvalidConfiguration(ConfigurationError):
    pass


class MissingCallback(SteamAuthError):
    """No callback URL was handed to the verifier."""


class VerificationTransportError(SteamAuthError):
    """The check_authentication round trip to Steam failed at the network level."""


class Unauthenticated(SteamAuthError):
    """Steam did not confirm the user's identity."""

    def __init__(self, message: str = "Unauthenticated"):
        super().__init__(message)


class ProfileFetchError(SteamAuthError):
    """The player summary could not be fetched or had an unexpected shape."""

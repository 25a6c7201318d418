"""sharelink — anonymous file sharing with expiring, optionally password-protected links."""

__version__ = "0.1.0"

"""Rosa - password butler over SMS."""

__version__ = "0.1.0"
__logo__ = "🌹"

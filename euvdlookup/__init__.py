"""Client, response records and interactive menu for the EUVD vulnerability API."""

__version__ = "0.1.0"
__all__ = ["models", "client", "cli"]
"""Trading journal performance analytics and risk monitoring."""

__version__ = "0.1.0"

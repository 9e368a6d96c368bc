"""CampShare: calendar, maintenance, cleaning and user management for a camp."""

__version__ = "0.1.0"

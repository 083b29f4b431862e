"""campreg: camp registration API (user profiles and staff notes)."""

__version__ = "0.1.0"

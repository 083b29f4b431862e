# src/campreg/db/__init__.py
# Session/engine live in campreg.db.session; importing the package stays cheap.
from .base import Base

__all__ = ["Base"]

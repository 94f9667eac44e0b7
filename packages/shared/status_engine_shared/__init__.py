"""Wire schemas shared by the Status Engine API and its clients."""

__version__ = "0.1.0"

"""Lead upload and task distribution service."""

__version__ = "0.1.0"

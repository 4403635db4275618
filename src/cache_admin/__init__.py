"""Control plane for remote cache agents."""

__version__ = "0.1.0"

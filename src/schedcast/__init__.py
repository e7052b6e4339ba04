"""schedcast - Freeze a live schedule into a shareable read-only broadcast."""

__version__ = "0.1.0"

"""version-updater: resolve upstream releases and verify container image tags."""

__version__ = "0.3.0"

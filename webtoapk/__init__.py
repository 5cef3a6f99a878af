"""webtoapk - package a web application as a signed Android APK."""

from importlib.metadata import PackageNotFoundError, version


try:
    __version__ = version("webtoapk")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"


__all__ = ["__version__"]

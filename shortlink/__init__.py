"""shortlink: a URL shortener with collision-safe slug allocation."""

__version__ = "1.0.0"

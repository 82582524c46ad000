"""Pet store and authenticated things JSON APIs served as WSGI applications."""

__version__ = "0.1.0"
__all__ = ["app", "auth", "store", "things"]
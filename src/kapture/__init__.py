"""Password-gated front end for a hosted media API."""

__version__ = '0.1.0'

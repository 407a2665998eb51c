"""Session-authenticated web app with user and admin roles."""

__version__ = "0.1.0"

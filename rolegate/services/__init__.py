"""Account, authentication, session and startup services."""

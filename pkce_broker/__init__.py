"""PKCE Broker - OAuth2 Authorization Code + PKCE mediator for single-page apps."""

__version__ = "1.0.0"

from .token_issuer import TokenIssuer, TokenSettings

__all__ = ["TokenIssuer", "TokenSettings"]

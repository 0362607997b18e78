from keydesk.infrastructure.security.password_hasher import BcryptPasswordHasher
from keydesk.infrastructure.security.token_issuer import JoseTokenIssuer

__all__ = ["BcryptPasswordHasher", "JoseTokenIssuer"]

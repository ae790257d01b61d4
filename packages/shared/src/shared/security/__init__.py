from shared.security.jwt_utils import AccessTokenClaims, AccessTokenVerifier
from shared.security.rbac import Role, parse_role
from shared.security.sanitize import clean_text, sanitize_html_text

__all__ = [
    "AccessTokenClaims",
    "AccessTokenVerifier",
    "Role",
    "clean_text",
    "parse_role",
    "sanitize_html_text",
]

"""Bearer-token authentication against required permission scopes."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Protocol

PERMISSIONS_CLAIM = "perms"
JWT_CLAIMS_CONTEXT_KEY = "jwt_claims"
SECURITY_SCHEME_NAME = "BearerAuth"
_BEARER_PREFIX = "Bearer "

Token = Mapping[str, Any]


class AuthError(Exception):
    """Raised when a request cannot be authenticated or authorised."""


class NoAuthHeaderError(AuthError):
    """The request carries no Authorization header."""

    def __init__(self, message: str = "Authorization header is missing") -> None:
        super().__init__(message)


class InvalidAuthHeaderError(AuthError):
    """The Authorization header is not of the form 'Bearer <jws>'."""

    def __init__(self, message: str = "Authorization header is malformed") -> None:
        super().__init__(message)


class ClaimsInvalidError(AuthError):
    """The token lacks one or more of the required scopes."""

    def __init__(
        self, message: str = "Provided claims do not match expected scopes"
    ) -> None:
        super().__init__(message)


class JWSValidator(Protocol):
    """Validates a JWS string and returns the claims of the token it carries."""

    def validate_jws(self, jws: str) -> Token:
        """Return the token's claims, raising if the JWS is not valid."""
        ...


def get_jws_from_request(headers: Mapping[str, str]) -> str:
    """Extract the JWS from an 'Authorization: Bearer <jws>' header."""
    auth_header = next(
        (value for key, value in headers.items() if key.lower() == "authorization"),
        "",
    )
    if not auth_header:
        raise NoAuthHeaderError()
    if not auth_header.startswith(_BEARER_PREFIX):
        raise InvalidAuthHeaderError()
    return auth_header[len(_BEARER_PREFIX):]


def get_claims_from_token(token: Token) -> list[str]:
    """Return the permission claims listed in the token, empty if there are none."""
    if PERMISSIONS_CLAIM not in token:
        return []
    raw_perms = token[PERMISSIONS_CLAIM]
    if not isinstance(raw_perms, list):
        raise AuthError(f"'{PERMISSIONS_CLAIM}' claim is unexpected type'")
    for index, claim in enumerate(raw_perms):
        if not isinstance(claim, str):
            raise AuthError(f"{PERMISSIONS_CLAIM}[{index}] is not a string")
    return list(raw_perms)


def check_token_claims(expected_claims: Iterable[str], token: Token) -> list[str]:
    """Ensure every expected claim is present in the token; return its claims."""
    try:
        claims = get_claims_from_token(token)
    except AuthError as exc:
        raise AuthError(f"getting claims from token: {exc}") from exc
    present = set(claims)
    if any(expected not in present for expected in expected_claims):
        raise ClaimsInvalidError()
    return claims


def authenticate(
    validator: JWSValidator,
    security_scheme_name: str,
    headers: Mapping[str, str],
    scopes: Iterable[str],
) -> Token:
    """Validate the request's bearer token and check it grants all scopes.

    Returns the validated token so the caller can make its claims available
    to the handler.
    """
    if security_scheme_name != SECURITY_SCHEME_NAME:
        raise AuthError(
            f"security scheme {security_scheme_name} != '{SECURITY_SCHEME_NAME}'"
        )
    jws = get_jws_from_request(headers)
    try:
        token = validator.validate_jws(jws)
    except Exception as exc:
        raise AuthError(f"validating JWS: {exc}") from exc
    check_token_claims(list(scopes), token)
    return token
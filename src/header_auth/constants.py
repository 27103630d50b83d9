"""Constants for header-auth."""

DEFAULT_HEADER_NAME = "Authorization"

# Name under which the scheme is reported in successful results.
DEFAULT_SCHEME = "HeaderAuthenticationScheme"

TOKEN_SCHEME = "Token"
BASIC_SCHEME = "Basic"

# Historical Basic-auth convention: one byte per character.
BASIC_ENCODING = "iso-8859-1"

MISSING_HEADER_MESSAGE = "The header '{header_name}' is required for authentication."
AUTHENTICATION_FAILED_MESSAGE = "Authentication failed."

"""Constants for the Kraken GraphQL API."""

from datetime import timedelta

GRAPHQL_URL = "https://api.octopus.energy/v1/graphql/"

AUTHORIZATION_HEADER = "Authorization"
TOKEN_SCHEME = "JWT"

TOKEN_EXPIRY_MARGIN = timedelta(seconds=60)
SLOT_CACHE_TTL = timedelta(minutes=10)

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "pyoctopusgo",
}

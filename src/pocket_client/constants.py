"""Settings shared by the client, config file and CLI.

Kept free of third-party imports so the CLI can load config without httpx.
"""

DEFAULT_TIMEOUT = 5.0  # seconds, end to end
DEFAULT_REDIRECT_URI = "https://localhost"

CONSUMER_KEY_ENV = "POCKET_CONSUMER_KEY"
ACCESS_TOKEN_ENV = "POCKET_ACCESS_TOKEN"

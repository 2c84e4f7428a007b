# src/serverlist/config/const.py
from __future__ import annotations

# entries not announced for this long are dropped from the list
RETENTION_SECONDS: float = 7 * 24 * 60 * 60

# our own entry must be at most this old for a round to count as verified
FRESHNESS_SECONDS: float = 5 * 60

# pause between the write and the verifying read
SETTLE_SECONDS: float = 3.0

# upper bound of the randomized wait before a retry
MAX_BACKOFF_SECONDS: float = 3 * 60

DEFAULT_SKYD_ADDRESS: str = "localhost:9980"
SKYD_USER_AGENT: str = "Sia-Agent"
SKYD_TIMEOUT_SECONDS: float = 30.0

IP_SERVICE_URL: str = "https://api.ipify.org"
IP_SERVICE_TIMEOUT_SECONDS: float = 10.0

DEFAULT_LOG_LEVEL: str = "INFO"

# environment variable names
ENV_OWN_NAME = "SKYNET_SERVER_API"
ENV_ENTROPY = "SERVERLIST_ENTROPY"
ENV_TWEAK = "SERVERLIST_TWEAK"
ENV_SKYD_ADDRESS = "SERVERLIST_SKYD"
ENV_API_PASSWORD = "SIA_API_PASSWORD"
ENV_IP_SERVICE = "SERVERLIST_IP_SERVICE"
ENV_MAX_ROUNDS = "SERVERLIST_MAX_ROUNDS"
ENV_DEADLINE = "SERVERLIST_DEADLINE"
ENV_STRICT_VERIFY = "SERVERLIST_STRICT_VERIFY"
ENV_LOG_LEVEL = "SERVERLIST_LOG_LEVEL"

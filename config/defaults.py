"""Project defaults and environment key constants."""

DEFAULT_PORT = 7003
# 0.0.0.0 accepts datagrams on every interface; localhost is internal only.
DEFAULT_HOST = "0.0.0.0"

DEFAULT_CONFIG_FILE = "config.json"
DEFAULT_LOG_LEVEL = "INFO"

ENV_PORT = "TASKER_PORT"
ENV_HOST = "TASKER_HOST"

CONFIG_PORT_KEY = "port"
CONFIG_HOST_KEY = "host"

MIN_PORT = 1
MAX_PORT = 65535

# Max characters of a received payload echoed into the log.
LOG_PREVIEW_CHARS = 220

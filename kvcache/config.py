# kvcache/config.py
import os

# Read once at process start; change via environment variables.
HOST = os.getenv("KVCACHE_HOST", "0.0.0.0")
PORT = int(os.getenv("KVCACHE_PORT", "8080"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
# ACCESS_LOG: "true" | "false" -- one log line per HTTP request
ACCESS_LOG = os.getenv("ACCESS_LOG", "true").lower() == "true"

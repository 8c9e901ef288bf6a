"""Configuration for the timeline service.

Loads environment variables (optionally from a .env file) and exposes
the defaults used by the client, catalog and app.
"""

import os

from dotenv import load_dotenv

load_dotenv()

WIKI_SUMMARY_BASE = os.getenv(
    "WIKI_SUMMARY_BASE", "https://en.wikipedia.org/api/rest_v1/page/summary/"
)
WIKI_TIMEOUT = float(os.getenv("WIKI_TIMEOUT", "10"))
WIKI_USER_AGENT = os.getenv(
    "WIKI_USER_AGENT", "art-history-timeline/1.0 (thumbnail lookup)"
)

TIMELINE_PATH = os.getenv("TIMELINE_PATH", "data/history_timeline.json")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "8000"))

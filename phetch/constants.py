"""
Shared constants for the phetch interactive client.
"""

VERSION = "1.0.1"

# Where to file issues when we have to crash.
BUG_URL = "https://github.com/xvxx/phetch/issues/new"

# Lines (or links) to jump by on page up/down.
SCROLL_LINES = 15

# Widest line we lay out for; text is wrapped and menus are centered on it.
MAX_COLS = 77

# Seconds between spinner frames.
SPINNER_INTERVAL = 0.5

HISTORY_TOPIC = "phetch.history.visit"

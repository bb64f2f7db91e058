import string
from pathlib import Path

CONFIG_DIR = Path.home() / ".config" / "try"
CONFIG_FILE_NAME = "config"

DEFAULT_TRIES_DIR = Path.home() / "src" / "tries"
DEFAULT_SHELL = "/bin/bash"

DATE_FORMAT = "%Y-%m-%d"
CLONE_TIMEOUT_S = 120

# Characters accepted into the query or a new directory name
ALLOWED_INPUT_CHARS = frozenset(string.ascii_letters + string.digits + "-_.:/@ ")

MIN_VISIBLE_ROWS = 3
CHROME_ROWS = 10

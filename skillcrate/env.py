from os import getenv
from pathlib import Path
from tempfile import gettempdir

SKILLCRATE_PROJECT_DIR = Path(
    getenv("SKILLCRATE_PROJECT_DIR", str(Path.cwd() / ".skills"))
)
SKILLCRATE_GLOBAL_DIR = Path(
    getenv("SKILLCRATE_GLOBAL_DIR", str(Path.home() / ".skillcrate" / "skills"))
)
SKILLCRATE_TEMP_DIR = Path(getenv("SKILLCRATE_TEMP_DIR", gettempdir()))
SKILLCRATE_GIT_TIMEOUT = int(getenv("SKILLCRATE_GIT_TIMEOUT", "120"))
SKILLCRATE_LOG_LEVEL = getenv("SKILLCRATE_LOG_LEVEL", "INFO").upper()

# Ensure 'backend/' is on sys.path so 'import counselor_availability' works
# whether pytest is started from the repo root or from backend/.
import os
from pathlib import Path
import sys

_BACKEND_DIR = Path(__file__).resolve().parent
if str(_BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(_BACKEND_DIR))

# Set before any counselor_availability import: settings are read at import time.
# Tests build their own in-memory engines; this only keeps the module engine off disk.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SITE_MODE", "local")
os.environ["IS_TESTING"] = "true"

# Migration scripts are loaded by Alembic, not collected
collect_ignore_glob = [
    "alembic/*.py",
    "alembic/versions/*.py",
]

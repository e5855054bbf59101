import os

# Configuration is loaded at import time, so the test environment must be in
# place before anything under src is imported.
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ["DATABASE_URL"] = "sqlite://"

from tests.fixtures import *  # noqa: E402,F401,F403

import os
import tempfile

# Settings are read once at import time, so test defaults must be in place first.
_TMP_DIR = tempfile.mkdtemp(prefix="skillforge-tests-")
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")
os.environ.setdefault("ANALYTICS_ENABLED", "0")
os.environ.setdefault("API_KEY", "")
os.environ.setdefault("RESUME_STORE_DB_PATH", os.path.join(_TMP_DIR, "resumes.db"))
os.environ.setdefault("ANALYTICS_DB_PATH", os.path.join(_TMP_DIR, "analytics.db"))

"""Pytest configuration shared by all test suites"""

import os
import sys
import tempfile
from pathlib import Path

# Add project root to path for logo_search imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Add tests directory to path for index_server import
tests_dir = Path(__file__).parent
sys.path.insert(0, str(tests_dir))

# main.py configures logging on import; keep test logs out of the repo
os.environ.setdefault("LOG_FILE", str(Path(tempfile.gettempdir()) / "logo-search-tests" / "logo-search.log"))
os.environ.setdefault("LOG_LEVEL", "WARNING")

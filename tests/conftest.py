"""
Pytest configuration and shared fixtures.
This file ensures the project root is in sys.path for imports and points the
application at throwaway settings before anything imports them.
"""

import os
import sys
from pathlib import Path

# Add project root to sys.path so we can import domain, services, etc.
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("SESSION_DB_URL", "sqlite://")
os.environ.setdefault("BACKEND_URL", "http://backend.test")
os.environ.setdefault("RECOMMENDATION_API_URL", "http://reco.test")
os.environ.setdefault("SPECIAL_RECOMMENDATION_URL", "http://special.test")
os.environ.setdefault("CHAT_API_URL", "http://chat.test")

"""
Path Configuration
Log file location (crashguard resolves crash.txt in the same directory).
"""

import os

# Base path for the project
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

LOG_DIR = os.environ.get("SB_LOG_DIR", BASE_DIR)
LOG_FILE = os.path.join(LOG_DIR, "sb_log.txt")


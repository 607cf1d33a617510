# src/gameblocker/blocker/config.py

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

EXPORTS_DIR = Path(os.getenv("GAMEBLOCKER_EXPORTS_DIR", "exports"))
INITIAL_VERSION = os.getenv("GAMEBLOCKER_INITIAL_VERSION", "v1.0.0")

# Windows-side paths, as seen by cmd.exe when the generated scripts run
HOSTS_PATH = r"%SystemRoot%\System32\drivers\etc\hosts"
TEMP_HOSTS_PATH = r"%TEMP%\hosts_temp"

BLOCK_MARK = "GAME BLOCKER"
REDIRECT_IP = "127.0.0.1"
RULE_PREFIX = "Block"

BLOCK_FILE_PATTERN = "block_games_{version}.bat"
UNBLOCK_FILE_PATTERN = "unblock_games_{version}.bat"

EXIT_DELAY_SECONDS = 5

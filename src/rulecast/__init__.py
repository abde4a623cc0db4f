"""
rulecast -- write your AI assistant rules once, cast them everywhere.

Rules authored under .rulecast/rules/ are projected into every
enabled tool's native format (Cursor .mdc, AGENTS.md, Copilot
instructions, JSON configs). Files that came from a shared blueprint
store are tracked in a ledger so local drift can be spotted and
reconciled.
"""

import os

__version__ = "0.1.0"

PROJECT_DIR = ".rulecast"
PRODUCT_NAME = "rulecast"

BLUEPRINT_STORE = os.environ.get("RULECAST_STORE", "~/.rulecast/store")

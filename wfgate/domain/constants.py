from pathlib import Path

# Engine storage
DEFAULT_STORE_ROOT = Path(".wfgate/store")
DEFAULT_APPROVAL_ROOT = Path(".wfgate/approval")
JSON_TEMP_SUFFIX = ".json.tmp"

# Polling
DEFAULT_POLL_INTERVAL = 1.0

# Per-instance approval trigger: <approval_root>/<workflow>/<run>/<task>/task.approved
TRIGGER_FILENAME = "task.approved"

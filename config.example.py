# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit access tokens. Use:
- .env (local, gitignored)

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TASKPAD_APP_NAME": "App display name (default: taskpad).",
    "TASKPAD_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Local data
    "TASKPAD_DATA_DIR": "Directory for local data and taskpad.log (default: .local/taskpad).",
    "TASKPAD_STORAGE_DB_PATH": "SQLite key/value file (default: <data_dir>/storage.sqlite3).",
    # Storage keys
    "TASKPAD_TASKS_KEY": "Key holding the JSON task list (default: tasks).",
    "TASKPAD_TOKEN_KEY": "Key holding the sign-in credential (default: userToken).",
    # UI
    "TASKPAD_CONFIRM_DELETE": "Ask before deleting a task (true/false, default: true).",
    "TASKPAD_REQUIRE_LOGIN": "Refuse task commands until /login (true/false, default: false).",
}

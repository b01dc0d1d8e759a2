# ╔════════════════════════════════════════════════════════════════════════════╗
# ║                       ENVIRONMENT CONFIGURATION                            ║
# ║    Typed access to environment variables for the event sync process.       ║
# ║       Includes helpers for boolean, integer, float and string values.      ║
# ╚════════════════════════════════════════════════════════════════════════════╝

# Standard library imports
import os
from pathlib import Path
from typing import Optional

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ HELPER FUNCTIONS                                                           ║
# ╚════════════════════════════════════════════════════════════════════════════╝

# --- get_bool_env ---
# Retrieves an environment variable and interprets it as a boolean.
# Considers '1', 'true', 'yes' (case-insensitive) as True.
# Args:
#     var_name: The name of the environment variable.
#     default: The default boolean value if the variable is not set.
# Returns: The boolean value of the environment variable or the default.
def get_bool_env(var_name: str, default: bool = False) -> bool:
    val = os.getenv(var_name, str(default)).lower()
    return val in ("1", "true", "yes")

# --- get_int_env ---
# Retrieves an environment variable and converts it to an integer.
# Args:
#     var_name: The name of the environment variable.
#     default: The default integer value if the variable is not set or blank.
# Returns: The integer value of the environment variable or the default.
# Raises: ValueError naming the variable if the value is not an integer.
def get_int_env(var_name: str, default: int = 0) -> int:
    val_str = get_str_env(var_name, None)
    if val_str is None:
        return default
    try:
        return int(val_str)
    except ValueError:
        raise ValueError(f"{var_name} must be an integer, got '{val_str}'") from None

# --- get_float_env ---
# Same as get_int_env, for fractional values such as delays in seconds.
def get_float_env(var_name: str, default: float = 0.0) -> float:
    val_str = get_str_env(var_name, None)
    if val_str is None:
        return default
    try:
        return float(val_str)
    except ValueError:
        raise ValueError(f"{var_name} must be a number, got '{val_str}'") from None

# --- get_str_env ---
# Retrieves an environment variable as a string, stripped of surrounding
# whitespace. Empty values are treated as unset.
# Args:
#     var_name: The name of the environment variable.
#     default: The default string value if the variable is not set.
# Returns: The string value of the environment variable or the default.
def get_str_env(var_name: str, default: Optional[str] = "") -> Optional[str]:
    val = os.getenv(var_name)
    if val is None or not val.strip():
        return default
    return val.strip()

# --- get_default_service_account_path ---
# Determines the default path for the Google service account JSON file.
# Checks potential locations in order: Docker volume, project root, current directory.
# Returns: A string representing the determined file path.
def get_default_service_account_path() -> str:
    docker_path = "/app/service_account.json"
    if os.path.exists(docker_path):
        return docker_path
    project_root = Path(__file__).resolve().parent.parent
    local_path = project_root / "service_account.json"
    if local_path.exists():
        return str(local_path)
    return "./service_account.json"

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ PROCESS-WIDE FLAGS                                                         ║
# ╚════════════════════════════════════════════════════════════════════════════╝

# Debug mode flag (controls verbose logging)
DEBUG: bool = get_bool_env("DEBUG", False)

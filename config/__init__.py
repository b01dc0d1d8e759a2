# ╔════════════════════════════════════════════════════════════════════════════╗
# ║                      CONFIGURATION PACKAGE INITIALIZER                     ║
# ║                                                                            ║
# ║  This package centralizes configuration for the event sync: loading the    ║
# ║  environment into a SyncConfig and logging a startup summary.              ║
# ╚════════════════════════════════════════════════════════════════════════════╝

# --- Exports ---
from .sync_config import (
    SyncConfig,             # Frozen configuration value handed to the reconciler
    load_sync_config,       # Builds a SyncConfig from environment variables
    log_startup_config,     # Logs a redacted configuration summary
    REQUIRED_ENV_VARS,      # Constant: variables that must be set
)

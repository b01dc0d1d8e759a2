# ╔════════════════════════════════════════════════════════════════════════════╗
# ║                         UTILITIES PACKAGE INITIALIZER                      ║
# ║  Environment helpers, logging setup and write pacers shared by the sync.   ║
# ╚════════════════════════════════════════════════════════════════════════════╝

from .environ import get_bool_env, get_float_env, get_int_env, get_str_env
from .logging import configure_logging, logger
from .rate_limiter import FixedDelayPacer, NoDelayPacer, TokenBucketPacer

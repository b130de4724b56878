"""
blnverify.core: shared infrastructure.

Modules:
    config      - VerifierConfiguration, SymmetryPolicy
    logging     - BlnLogger with the block context, configure_loggers
    stats       - BatchStatistics and BlockResult
"""

# Configuration
from .config import (
    ConfigConstants,
    DEFAULT_USER_DIR,
    SymmetryPolicy,
    VerifierConfiguration,
)

# Logging
from .logging import (
    BlnLogger,
    LevelFlag,
    configure_loggers,
    getLogger,
    set_level,
)

# Statistics
from .stats import BatchStatistics, BlockResult

__all__ = [
    "ConfigConstants",
    "DEFAULT_USER_DIR",
    "SymmetryPolicy",
    "VerifierConfiguration",
    "BlnLogger",
    "LevelFlag",
    "configure_loggers",
    "getLogger",
    "set_level",
    "BatchStatistics",
    "BlockResult",
]

__version__ = "0.1.0"
from prompt_relay.config import ConfigManager
from prompt_relay.core.scorer import score_breakdown, similarity

config = ConfigManager()

__all__ = [
    "__version__",
    "config",
    "similarity",
    "score_breakdown",
]

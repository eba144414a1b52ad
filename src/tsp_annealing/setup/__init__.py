from .HP import AnnealingConfig, load_config, parse_config, get_script_arguments
from .Logger import configure_logger

__all__ = [
    "AnnealingConfig",
    "load_config",
    "parse_config",
    "get_script_arguments",
    "configure_logger",
]

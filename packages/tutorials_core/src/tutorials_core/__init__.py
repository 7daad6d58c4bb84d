from .config import TutorialsSettings, tutorials_settings
from .logging import configure_logging, get_logger, request_id_scope, setup_logging

__all__ = [
    "TutorialsSettings",
    "configure_logging",
    "get_logger",
    "request_id_scope",
    "setup_logging",
    "tutorials_settings",
]

from .app import __version__, create_app
from .controller import TutorialController
from .models import Tutorial

__all__ = ["Tutorial", "TutorialController", "__version__", "create_app"]

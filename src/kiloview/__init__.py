from .constants import KILOVIEW_VERSION as __version__

__all__ = ["__version__"]

"""Edit advisory and type-check gate hooks for backend projects."""
import logging

__version__ = "1.0.0"

logging.getLogger("edit_guard").addHandler(logging.NullHandler())

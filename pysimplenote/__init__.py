"""The pysimplenote library."""

from pysimplenote.const import VERSION
from pysimplenote.services.notes import NotesService

__version__ = VERSION

__all__ = ["NotesService", "__version__"]

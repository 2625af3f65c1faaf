"""Static technology-stack detection for source repositories."""

from .analyser import analyse
from .models import MatchResult, TreeEntry

__version__ = "1.0.0"

__all__ = ["MatchResult", "TreeEntry", "analyse", "__version__"]

"""Base classes for asset-list providers."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import AssetPath, ExtractedLog


class AssetListProvider(ABC):
    """Contract for sources that report which assets were packed into a build."""

    name = "provider"

    @abstractmethod
    def provide(self) -> Optional[List[AssetPath]]:
        """Return packed asset paths in build order, or None when no build is available."""

    def build_log(self) -> Optional[ExtractedLog]:
        """Return the log regions backing the last ``provide`` call, when there are any."""
        return None

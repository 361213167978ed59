"""Response generator interface"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from ..models.session import TestSession


class ResponseGenerator(ABC):
    """Builds a response payload for `dynamic` scenario overrides"""

    name: str = ""
    description: str = ""

    @abstractmethod
    def generate(self, parameters: Dict[str, Any], session: Optional[TestSession] = None) -> Dict[str, Any]:
        """
        Generate response data.

        Args:
            parameters: Parameters from the scenario's response configuration
            session: Current test session, if any

        Returns:
            JSON-serializable response body
        """

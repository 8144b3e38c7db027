from abc import ABC, abstractmethod
from typing import Any


class IEventRecorder(ABC):
    """Observability interface - records security-relevant events"""

    @abstractmethod
    def record(self, event: str, **fields: Any) -> None:
        pass

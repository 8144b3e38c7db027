from abc import ABC, abstractmethod


class EmailDeliveryError(Exception):
    """Raised when an outbound email could not be handed to the mail server"""


class IEmailDispatcher(ABC):
    """Outbound email interface - application layer"""

    @abstractmethod
    async def send_reset_code(self, email: str, code: str) -> None:
        """Send a password reset code, raising EmailDeliveryError on failure"""
        pass

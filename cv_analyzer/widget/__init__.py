from .client import RelayClient, RelayResponseError, RelayTransportError
from .controller import UploadController
from .state import UploadedDocument, WidgetState

__all__ = [
    "RelayClient",
    "RelayResponseError",
    "RelayTransportError",
    "UploadController",
    "UploadedDocument",
    "WidgetState",
]

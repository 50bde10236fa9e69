from .bulker import (
    FUNCTION_ID,
    BulkerDestination,
    BulkerDestinationConfig,
    FunctionContext,
)
from .client_ids import repair_client_ids

__all__ = [
    "FUNCTION_ID",
    "BulkerDestination",
    "BulkerDestinationConfig",
    "FunctionContext",
    "repair_client_ids",
]

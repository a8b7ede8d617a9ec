from .client import KeywordClient
from .config_types import ClientConfig
from .errors import ApiError, AzboxClientError, ConfigurationError, UnexpectedResponseShapeError
from .models import KeywordFields, KeywordRecord

__all__ = [
    "KeywordClient",
    "ClientConfig",
    "ApiError",
    "AzboxClientError",
    "ConfigurationError",
    "UnexpectedResponseShapeError",
    "KeywordFields",
    "KeywordRecord",
]

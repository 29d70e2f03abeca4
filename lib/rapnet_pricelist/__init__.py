__version__ = "1.0.0"

from .client import RapnetClient
from .config_types import ClientConfig
from .errors import ApiError, AuthError, AuthorizationRedirect, MissingArgumentError, NetworkError
from .result import Err, Ok

__all__ = [
    "__version__",
    "RapnetClient",
    "ClientConfig",
    "ApiError",
    "AuthError",
    "AuthorizationRedirect",
    "MissingArgumentError",
    "NetworkError",
    "Ok",
    "Err",
]

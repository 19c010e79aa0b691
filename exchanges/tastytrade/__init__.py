from .client import (
    DEFAULT_BASE_URL,
    SANDBOX_BASE_URL,
    TastytradeClient,
    TastytradeCredentials,
    encode_params,
)
from .config import ClientConfig, load_config, load_credentials
from .decoding import decode_records, from_json, to_json
from .errors import (
    AuthError,
    ClientError,
    DecodeError,
    HTTPStatusError,
    NetworkError,
    ServerError,
    TastytradeError,
)
from .models import DataResponse, ListResponse, Pagination
from .sessions import Session, User

__all__ = [
    "DEFAULT_BASE_URL",
    "SANDBOX_BASE_URL",
    "TastytradeClient",
    "TastytradeCredentials",
    "encode_params",
    "ClientConfig",
    "load_config",
    "load_credentials",
    "decode_records",
    "from_json",
    "to_json",
    "AuthError",
    "ClientError",
    "DecodeError",
    "HTTPStatusError",
    "NetworkError",
    "ServerError",
    "TastytradeError",
    "DataResponse",
    "ListResponse",
    "Pagination",
    "Session",
    "User",
]

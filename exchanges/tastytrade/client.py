from __future__ import annotations

import dataclasses
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Type, TypeVar, Union

import requests

from .accounts import AccountsAPI
from .backtesting import BacktestingAPI
from .decoding import decode_records, from_json, parse_json
from .errors import AuthError, ClientError, DecodeError, NetworkError, ServerError
from .instruments import InstrumentsAPI
from .market_data import MarketDataAPI
from .models import DataResponse, ListResponse, Pagination
from .sessions import Session
from .transactions import TransactionsAPI

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_BASE_URL = "https://api.tastytrade.com"
SANDBOX_BASE_URL = "https://api.cert.tastyworks.com"
REQUEST_TIMEOUT_SEC = 10.0

Params = Union[Mapping[str, Any], Iterable[Tuple[str, Any]], None]


@dataclass(frozen=True)
class TastytradeCredentials:
    login: str
    password: str = field(repr=False)


def encode_params(params: Params) -> List[Tuple[str, str]]:
    """
    Flatten query parameters into sorted (key, value) pairs.

    Lists repeat their key, booleans become `true`/`false`, and None, empty
    strings and empty lists are dropped. Keys are sorted; repeated values
    keep their order.
    """
    if not params:
        return []
    pairs = params.items() if isinstance(params, Mapping) else params
    out: List[Tuple[str, str]] = []
    for key, value in pairs:
        values = value if isinstance(value, (list, tuple)) else [value]
        for v in values:
            if v is None or v == "":
                continue
            if isinstance(v, bool):
                v = "true" if v else "false"
            out.append((key, str(v)))
    out.sort(key=lambda kv: kv[0])
    return out


def _mask(token: str) -> str:
    t = (token or "").strip()
    if not t:
        return "(empty)"
    return (t[:4] + "..." + t[-4:]) if len(t) > 12 else "*" * len(t)


class TastytradeClient:
    """
    Client handle for the tastytrade REST API.

    Holds the base URL, the session token, an optional API version and a
    `requests.Session`. Every call is one request/response round trip with a
    fixed timeout; nothing is retried, cached or queued.

    Rules:
    - Do not log secrets or payloads
    - The token is set by `authenticate` and sent verbatim as `Authorization`
    - Resource accessors live on `accounts`, `transactions`, `instruments`,
      `market_data` and `backtests`
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        api_version: str = "",
        http: Optional[requests.Session] = None,
    ) -> None:
        self._base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self._api_version = api_version or ""
        self._http = http or requests.Session()
        self._token = ""
        self._token_lock = threading.Lock()

        self.accounts = AccountsAPI(self)
        self.transactions = TransactionsAPI(self)
        self.instruments = InstrumentsAPI(self)
        self.market_data = MarketDataAPI(self)
        self.backtests = BacktestingAPI(self)

    @classmethod
    def from_config(cls, config: Any, http: Optional[requests.Session] = None) -> "TastytradeClient":
        return cls(config.base_url, api_version=config.api_version, http=http)

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def api_version(self) -> str:
        return self._api_version

    def set_api_version(self, version: str) -> None:
        """Send `Accept-Version: <version>` on instrument calls; empty disables the header."""
        self._api_version = version or ""

    @property
    def token(self) -> str:
        with self._token_lock:
            return self._token

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "TastytradeClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # session
    # ------------------------------------------------------------------

    def authenticate(self, login: str, password: str) -> Session:
        """
        Exchange login/password for a session token and install it.

        Only 200 and 201 count as success. Anything else raises AuthError and
        the previous token, if any, stays in place.
        """
        status, body = self._send(
            "POST",
            "/sessions",
            json_body={"login": login, "password": password},
            authorized=False,
        )
        if status not in (200, 201):
            raise AuthError(status)

        payload = parse_json(body)
        if not isinstance(payload, dict) or not isinstance(payload.get("data"), dict):
            raise DecodeError("session response has no data object")
        session = from_json(Session, payload["data"])
        if not session.session_token:
            raise DecodeError("session response has no session-token")
        context = payload.get("context")
        if isinstance(context, str):
            session = dataclasses.replace(session, context=context)

        with self._token_lock:
            self._token = session.session_token
        logger.debug("session created for %s, token=%s", session.user.username, _mask(session.session_token))
        return session

    def authenticate_with(self, creds: TastytradeCredentials) -> Session:
        return self.authenticate(creds.login, creds.password)

    # ------------------------------------------------------------------
    # transport
    # ------------------------------------------------------------------

    def _send(
        self,
        method: str,
        path: str,
        *,
        params: Params = None,
        json_body: Any = None,
        versioned: bool = False,
        authorized: bool = True,
    ) -> Tuple[int, bytes]:
        headers = {"Accept": "application/json"}
        if authorized:
            token = self.token
            if token:
                headers["Authorization"] = token
        if versioned and self._api_version:
            headers["Accept-Version"] = self._api_version

        url = f"{self._base_url}{path}"
        try:
            r = self._http.request(
                method,
                url,
                params=encode_params(params) or None,
                json=json_body,
                headers=headers,
                timeout=REQUEST_TIMEOUT_SEC,
            )
        except requests.RequestException as e:
            raise NetworkError(f"{method} {path}: {type(e).__name__}: {e}") from e

        logger.debug("%s %s -> %s", method, path, r.status_code)
        return r.status_code, r.content

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Params = None,
        json_body: Any = None,
        versioned: bool = False,
    ) -> bytes:
        """Issue one authorized request and return the raw body of a 2xx/3xx response."""
        status, body = self._send(method, path, params=params, json_body=json_body, versioned=versioned)
        if 400 <= status < 500:
            raise ClientError(status)
        if status >= 500:
            raise ServerError(status)
        return body

    def decode_into(self, raw: Union[bytes, str], shape: Any) -> Any:
        """Parse `raw` as JSON directly into `shape` (dataclass, list[...] or primitive)."""
        return from_json(shape, parse_json(raw))

    # ------------------------------------------------------------------
    # envelope helpers used by the resource APIs
    # ------------------------------------------------------------------

    def _envelope(self, method: str, path: str, **kw: Any) -> dict:
        payload = parse_json(self.request(method, path, **kw))
        if not isinstance(payload, dict):
            raise DecodeError(f"{path}: expected a JSON object envelope")
        return payload

    def get_data(self, path: str, shape: Type[T], **kw: Any) -> DataResponse[T]:
        """`{"data": {...}, "context": ...}` -> DataResponse[shape]"""
        return _data_response(self._envelope("GET", path, **kw), shape)

    def post_data(self, path: str, body: Any, shape: Type[T], **kw: Any) -> DataResponse[T]:
        return _data_response(self._envelope("POST", path, json_body=body, **kw), shape)

    def get_items(self, path: str, shape: Type[T], **kw: Any) -> ListResponse[T]:
        """`{"data": {"items": [...]}, "context": ..., "pagination": ...}` -> ListResponse[shape]"""
        payload = self._envelope("GET", path, **kw)
        if "data" not in payload:
            raise DecodeError(f"{path}: response has no data envelope")
        data = payload["data"] or {}
        if not isinstance(data, dict):
            raise DecodeError(f"{path}: expected data to be an object")
        items = from_json(List[shape], data.get("items") or [])
        pagination = payload.get("pagination")
        return ListResponse(
            items=items,
            context=_str(payload.get("context")),
            api_version=_str(payload.get("api-version")),
            pagination=from_json(Pagination, pagination) if isinstance(pagination, dict) else None,
        )

    def get_records(self, path: str, shape: Type[T], **kw: Any) -> ListResponse[T]:
        """List endpoints whose top-level shape varies; see decoding.decode_records."""
        return decode_records(self.request("GET", path, **kw), shape)


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _data_response(payload: dict, shape: Type[T]) -> DataResponse[T]:
    return DataResponse(data=from_json(shape, payload.get("data")), context=_str(payload.get("context")))

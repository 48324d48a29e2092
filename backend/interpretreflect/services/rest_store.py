import json
import logging
import socket
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass, field
from typing import Any, Callable

from interpretreflect.services.credentials import AnonymousCredentialProvider, CredentialProvider
from interpretreflect.settings import StoreSettings, load_store_settings

LOGGER = logging.getLogger(__name__)

SESSION_EXPIRED_MARKERS = ("JWT", "PGRST301", "PGRST303")
UNIQUE_VIOLATION_CODE = "23505"


class StoreRequestError(RuntimeError):
    def __init__(self, status: int, body: str) -> None:
        super().__init__(f"HTTP {status}: {body[:500]}")
        self.status = status
        self.body = body


class StoreTimeoutError(StoreRequestError):
    def __init__(self, message: str = "Store request timed out") -> None:
        super().__init__(0, message)


def is_session_expired(body: str, status: int = 0) -> bool:
    if status == 401:
        return True
    return any(marker in (body or "") for marker in SESSION_EXPIRED_MARKERS)


def is_unique_violation(exc: StoreRequestError) -> bool:
    return exc.status == 409 or UNIQUE_VIOLATION_CODE in (exc.body or "")


@dataclass
class StoreRequest:
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | None = None


@dataclass
class StoreResponse:
    status: int
    body: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


Transport = Callable[[StoreRequest, float], StoreResponse]


def urllib_transport(request: StoreRequest, timeout: float) -> StoreResponse:
    req = urllib.request.Request(
        url=request.url,
        data=request.body,
        headers=request.headers,
        method=request.method,
    )
    try:
        with urllib.request.urlopen(req, timeout=timeout) as response:
            return StoreResponse(status=response.status, body=response.read().decode("utf-8"))
    except urllib.error.HTTPError as exc:  # pragma: no cover - depends on remote store
        body = exc.read().decode("utf-8", errors="ignore")
        return StoreResponse(status=exc.code, body=body)
    except urllib.error.URLError as exc:  # pragma: no cover - depends on network
        if isinstance(exc.reason, (socket.timeout, TimeoutError)):
            raise StoreTimeoutError() from exc
        raise StoreRequestError(0, f"Network error: {exc.reason}") from exc
    except (socket.timeout, TimeoutError) as exc:  # pragma: no cover - depends on network
        raise StoreTimeoutError() from exc


class PostgrestClient:
    """Minimal client for the hosted store's PostgREST interface."""

    def __init__(
        self,
        settings: StoreSettings | None = None,
        credentials: CredentialProvider | None = None,
        transport: Transport | None = None,
    ) -> None:
        self.settings = settings or load_store_settings()
        self._credentials = credentials or AnonymousCredentialProvider()
        self._transport = transport or urllib_transport

    def insert(
        self,
        table: str,
        row: dict[str, Any],
        *,
        prefer: str = "return=minimal",
        timeout: float | None = None,
    ) -> list[dict]:
        response = self._send(
            "POST",
            table,
            body=row,
            prefer=prefer,
            timeout=timeout,
        )
        return _decode_rows(response.body)

    def select(
        self,
        table: str,
        filters: list[tuple[str, str]] | None = None,
        *,
        columns: str = "*",
        order: str | None = None,
        limit: int | None = None,
        timeout: float | None = None,
    ) -> list[dict]:
        params = list(filters or [])
        if columns != "*":
            params.append(("select", columns))
        if order:
            params.append(("order", order))
        if limit:
            params.append(("limit", str(int(limit))))
        response = self._send("GET", table, params=params, timeout=timeout)
        return _decode_rows(response.body)

    def update(
        self,
        table: str,
        values: dict[str, Any],
        filters: list[tuple[str, str]],
        *,
        timeout: float | None = None,
    ) -> None:
        self._send(
            "PATCH",
            table,
            params=filters,
            body=values,
            prefer="return=minimal",
            timeout=timeout,
        )

    def _send(
        self,
        method: str,
        table: str,
        *,
        params: list[tuple[str, str]] | None = None,
        body: dict[str, Any] | None = None,
        prefer: str | None = None,
        timeout: float | None = None,
    ) -> StoreResponse:
        url = f"{self.settings.rest_url}/{table}"
        if params:
            url = f"{url}?{urllib.parse.urlencode(params)}"
        headers = self._headers(prefer)
        payload = None
        if body is not None:
            headers["Content-Type"] = "application/json"
            payload = json.dumps(body, ensure_ascii=True, default=str).encode("utf-8")

        response = self._transport(
            StoreRequest(method=method, url=url, headers=headers, body=payload),
            timeout or self.settings.read_timeout_seconds,
        )
        if not response.ok:
            LOGGER.debug("Store %s %s failed with HTTP %s", method, table, response.status)
            raise StoreRequestError(response.status, response.body)
        return response

    def _headers(self, prefer: str | None) -> dict[str, str]:
        anon_key = self.settings.anon_key
        token = self._credentials.access_token() or anon_key
        headers = {
            "apikey": anon_key,
            "Authorization": f"Bearer {token}",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers


def eq(value: Any) -> str:
    return f"eq.{value}"


def gte(value: Any) -> str:
    return f"gte.{value}"


def _decode_rows(raw: str) -> list[dict]:
    if not raw or not raw.strip():
        return []
    decoded = json.loads(raw)
    if isinstance(decoded, list):
        return [row for row in decoded if isinstance(row, dict)]
    if isinstance(decoded, dict):
        return [decoded]
    return []

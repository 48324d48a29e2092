from typing import Protocol


class CredentialProvider(Protocol):
    def access_token(self) -> str | None:
        ...


class AnonymousCredentialProvider:
    """No user session: the store client falls back to the anon key."""

    def access_token(self) -> str | None:
        return None


class StaticCredentialProvider:
    def __init__(self, token: str | None) -> None:
        self._token = (token or "").strip() or None

    def access_token(self) -> str | None:
        return self._token


class RequestCredentialProvider(StaticCredentialProvider):
    """Forwards the caller's own ``Authorization: Bearer`` token to the store."""

    def __init__(self, authorization: str | None) -> None:
        token = None
        if authorization and authorization.lower().startswith("bearer "):
            token = authorization.split(" ", 1)[1]
        super().__init__(token)

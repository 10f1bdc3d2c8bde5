from typing import Any, Optional

import requests

from fintrack.domain import LoginResponse
from fintrack.errors import ApiError, AuthenticationError
from fintrack.logging_setup import get_logger
from fintrack.session import Session

logger = get_logger(__name__)


def _detail(response: requests.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("detail"):
        return str(body["detail"])
    return None


class ApiClient:
    """Thin JSON client for the finance backend.

    The credential lives on ``session``; nothing is read from global state.
    """

    def __init__(
        self,
        base_url: str,
        session: Session,
        timeout: float = 10.0,
        http: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session
        self.timeout = timeout
        self.http = http or requests.Session()

    def _url(self, path: str) -> str:
        return self.base_url + "/" + path.lstrip("/")

    def request(self, method: str, path: str, **kwargs) -> Any:
        headers = {"Content-Type": "application/json"}
        headers.update(kwargs.pop("headers", {}))
        headers.update(self.session.auth_headers())
        try:
            response = self.http.request(method, self._url(path), headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise ApiError(f"{method} {path} failed: {e}") from e

        if response.status_code == 401:
            logger.warning("%s %s returned 401, dropping credentials", method, path)
            self.session.invalidate()
            raise AuthenticationError("Not authenticated", status_code=401, detail=_detail(response))
        if not response.ok:
            raise ApiError(
                f"{method} {path} returned {response.status_code}",
                status_code=response.status_code,
                detail=_detail(response),
            )
        if not response.content:
            return None
        return response.json()

    def get(self, path: str, params: Optional[dict] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, data: Any = None, params: Optional[dict] = None) -> Any:
        return self.request("POST", path, json=data if data is not None else {}, params=params)

    def put(self, path: str, data: Any = None, params: Optional[dict] = None) -> Any:
        return self.request("PUT", path, json=data if data is not None else {}, params=params)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)

    def login(self, username: str, password: str) -> LoginResponse:
        body = self.request(
            "POST",
            "/auth/login",
            data={"username": username, "password": password},
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        result = LoginResponse(
            access_token=body["access_token"],
            token_type=body.get("token_type", "bearer"),
        )
        if result.access_token:
            self.session.store(result.access_token)
        return result

    def logout(self) -> None:
        self.session.invalidate(expired=False)

    def is_authenticated(self) -> bool:
        return self.session.is_authenticated()

"""HTTP client for the S360 sample lookup service."""

import logging
from typing import Any, Optional

import httpx

from . import config
from .paths import MISSING, first_present, resolve_path
from .session import Session

logger = logging.getLogger(__name__)

EQUIPMENT_ID_PATH = "coleta.dadosColetaEquipamento.equipamento.id"


class ApiError(Exception):
    """The lookup service answered with a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(ApiError):
    """Login succeeded at the HTTP level but returned no token."""


def _json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return {}


class S360Client:
    """
    Thin wrapper over the lookup endpoints.

    The session is passed explicitly to every call; the client holds no
    authentication state of its own.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = (base_url or config.base_url()).rstrip("/")
        self.http = httpx.Client(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else config.timeout(),
            headers={"Accept": "application/json"},
            transport=transport,
        )

    def __enter__(self) -> "S360Client":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self.http.close()

    def login(self, username: str, password: str) -> Session:
        response = self.http.post(
            "/api/login", json={"username": username, "password": password}
        )
        data = _json(response)
        if not response.is_success:
            raise ApiError(
                f"Authentication failed ({response.status_code})", response.status_code
            )
        token = first_present(data, ("token", "access_token"))
        if not token:
            raise AuthenticationError("Login response carried no token")
        return Session(token, self.base_url)

    def fetch_sample(self, session: Session, code: str) -> Any:
        """Fetch the raw record for a sample code, client name enriched."""
        response = self.http.get(
            "/api/v1/amostra/view",
            params={"numeroAmostra": code},
            headers=session.headers,
        )
        data = _json(response)
        if not response.is_success:
            raise ApiError(
                f"Sample lookup failed ({response.status_code})", response.status_code
            )
        self._enrich_client(session, data)
        return data

    def fetch_equipment(self, session: Session, equipment_id: str) -> Any:
        response = self.http.get(
            "/api/v1/equipamento/view",
            params={"id": equipment_id},
            headers=session.headers,
        )
        if not response.is_success:
            raise ApiError(
                f"Equipment lookup failed ({response.status_code})",
                response.status_code,
            )
        return _json(response)

    def _enrich_client(self, session: Session, data: Any) -> None:
        # Client name is replaced by the linked equipment's site ('obra')
        equipment_id = resolve_path(data, EQUIPMENT_ID_PATH)
        if equipment_id is MISSING or equipment_id in (None, ""):
            return
        try:
            equipment = self.fetch_equipment(session, str(equipment_id))
        except (ApiError, httpx.HTTPError) as e:
            logger.warning("Equipment %s lookup failed: %s", equipment_id, e)
            return
        site = first_present(equipment, ("obra.nome",))
        if site and isinstance(data, dict):
            data["obra"] = site

"""Session class for an authenticated lookup service connection."""


class Session:
    """Bearer token plus the service it was issued by."""

    def __init__(self, token: str, base_url: str):
        self.token = token
        self.base_url = base_url

    @property
    def headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"}

    def __repr__(self) -> str:
        return f"Session(base_url={self.base_url!r})"

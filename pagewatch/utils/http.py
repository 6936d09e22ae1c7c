import requests

from ..config import DEFAULT_USER_AGENT


class PoliteSession(requests.Session):
    def __init__(self, user_agent: str | None = None, timeout: float = 30.0):
        super().__init__()
        self.headers.update({"User-Agent": user_agent or DEFAULT_USER_AGENT})
        self.timeout = timeout

    def request(self, method, url, **kwargs):
        # one bounded attempt per call; no retry adapter is mounted
        kwargs.setdefault("timeout", self.timeout)
        return super().request(method, url, **kwargs)

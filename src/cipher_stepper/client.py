from typing import Any, Dict, List, Optional

import requests

from cipher_stepper.errors import CipherStepperError
from cipher_stepper.models.state import CipherMode

DEFAULT_BASE_URL = "http://127.0.0.1:8000"


class ClientError(CipherStepperError):
    def __init__(self, url: str, status_code: int, detail: str):
        self.url = url
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Request to {url} failed: {status_code} {detail}")


class PlaygroundClient:
    """Thin client for a running playground API."""

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: float = 10):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _url(self, path: str) -> str:
        return f"{self.base_url}/api/{path.lstrip('/')}"

    def _check(self, url: str, response: requests.Response) -> Any:
        if response.status_code != 200:
            try:
                detail = response.json().get("detail", response.text)
            except ValueError:
                detail = response.text
            raise ClientError(url, response.status_code, str(detail))
        return response.json()

    def list_ciphers(self) -> List[Dict[str, Any]]:
        url = self._url("ciphers")
        return self._check(url, requests.get(url, timeout=self.timeout))

    def run(
        self,
        cipher: str,
        text: str,
        options: Optional[Dict[str, Any]] = None,
        mode: CipherMode = "encrypt",
        strict: bool = False,
        trace: bool = False,
    ) -> Dict[str, Any]:
        url = self._url(mode)
        payload = {"cipher": cipher, "text": text, "options": options or {}, "strict": strict, "trace": trace}
        return self._check(url, requests.post(url, json=payload, timeout=self.timeout))

    def analyze(self, text: str, max_key_length: int = 15) -> Dict[str, Any]:
        url = self._url("analyze")
        payload = {"text": text, "max_key_length": max_key_length}
        return self._check(url, requests.post(url, json=payload, timeout=self.timeout))

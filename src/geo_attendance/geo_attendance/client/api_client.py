from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Non-2xx answer from the attendance API."""

    def __init__(self, status: int, message: str):
        super().__init__(f"{status}: {message}")
        self.status = status
        self.message = message


class ApiClient:
    """Client for the attendance REST API.

    The bearer token lives on the instance: two clients never share a login.
    """

    def __init__(self, base_url: str, *, session: Optional[requests.Session] = None, timeout: float = 10):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.token: Optional[str] = None
        self.user: Optional[Dict] = None

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def _headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def _request(self, method: str, path: str, *, params: Optional[Dict] = None, json: Any = None, raw: bool = False):
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        response = self.session.request(
            method,
            f"{self.base_url}{path}",
            params=params or None,
            json=json,
            headers=self._headers(),
            timeout=self.timeout,
        )
        if not 200 <= response.status_code < 300:
            try:
                body = response.json()
            except ValueError:
                body = None
            message = body.get("message") if isinstance(body, dict) else None
            message = message or response.reason or "Request failed"
            logger.debug("%s %s -> %s %s", method, path, response.status_code, message)
            raise ApiError(response.status_code, message)
        if raw:
            return response.content
        return response.json()

    # Auth
    def login(self, username: str, password: str) -> Dict:
        data = self._request("POST", "/api/auth/login", json={"username": username, "password": password})
        self.token = data["token"]
        self.user = data["user"]
        return data["user"]

    def logout(self) -> None:
        self.token = None
        self.user = None

    def me(self) -> Dict:
        return self._request("GET", "/api/auth/me")

    def register(self, *, username: str, password: str, name: str, email: str, role: str = "user") -> Dict:
        payload = {"username": username, "password": password, "name": name, "email": email, "role": role}
        return self._request("POST", "/api/auth/register", json=payload)["user"]

    def request_otp(self, email: str) -> Dict:
        return self._request("POST", "/api/auth/request-otp", json={"email": email})

    def verify_otp(self, email: str, otp: str) -> bool:
        return bool(self._request("POST", "/api/auth/verify-otp", json={"email": email, "otp": otp}).get("success"))

    def reset_password(self, email: str, otp: str, new_password: str) -> Dict:
        payload = {"email": email, "otp": otp, "newPassword": new_password}
        return self._request("POST", "/api/auth/reset-password", json=payload)

    # Attendance
    def check_in(self, location: Dict, party_id: int) -> Dict:
        payload = {"type": "check-in", "location": location, "partyId": party_id}
        return self._request("POST", "/api/attendance/checkin-checkout", json=payload)

    def check_out(self, location: Dict) -> Dict:
        payload = {"type": "check-out", "location": location}
        return self._request("POST", "/api/attendance/checkin-checkout", json=payload)

    def list_attendance(
        self,
        *,
        start: Optional[str] = None,
        end: Optional[str] = None,
        status: Optional[str] = None,
        user_id: Optional[int] = None,
    ) -> List[Dict]:
        params = {"start": start, "end": end, "status": status, "userId": user_id}
        return self._request("GET", "/api/attendance", params=params)

    def today(self) -> Optional[Dict]:
        return self._request("GET", "/api/attendance/today")

    def status(self) -> str:
        return self._request("GET", "/api/attendance/status")["status"]

    def stats(self, user_id: Optional[int] = None) -> Dict:
        path = "/api/attendance/stats" if user_id is None else f"/api/attendance/stats/{user_id}"
        return self._request("GET", path)

    def overview(self) -> Dict:
        return self._request("GET", "/api/attendance/overview")

    def report_csv(self, *, start: Optional[str] = None, end: Optional[str] = None, status: Optional[str] = None) -> bytes:
        params = {"start": start, "end": end, "status": status}
        return self._request("GET", "/api/attendance/report.csv", params=params, raw=True)

    # Parties
    def list_parties(self) -> List[Dict]:
        return self._request("GET", "/api/party")

    def list_all_parties(self) -> List[Dict]:
        return self._request("GET", "/api/party/all")

    def create_party(self, name: str, description: str = "") -> Dict:
        return self._request("POST", "/api/party", json={"name": name, "description": description})

    def update_party(
        self,
        party_id: int,
        *,
        name: str,
        description: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> Dict:
        payload: Dict[str, Any] = {"name": name}
        if description is not None:
            payload["description"] = description
        if is_active is not None:
            payload["isActive"] = is_active
        return self._request("PUT", f"/api/party/{party_id}", json=payload)

    def delete_party(self, party_id: int) -> Dict:
        return self._request("DELETE", f"/api/party/{party_id}")

    def health(self) -> Dict:
        return self._request("GET", "/api/health")

"""Users API client.

This module defines a simple client wrapper around the Users API HTTP
surface.  The client uses the ``requests`` library internally and
exposes one method per operation:

* :meth:`UsersAPI.create_user` – create a user and return its id.
* :meth:`UsersAPI.list_users` – list users, optionally filtered by role.
* :meth:`UsersAPI.get_user` – fetch a single user by its identifier.
* :meth:`UsersAPI.update_user` – change any subset of a user's fields.
* :meth:`UsersAPI.delete_user` – delete one user, or all of them.

Every method returns a tuple ``(data, error)``.  On success ``data``
holds the ``result`` part of the response envelope and ``error`` is
``None``.  On failure ``data`` is ``None`` (or an empty list) and
``error`` is a dictionary with keys ``status_code``, ``message`` and,
for validation failures, ``errors``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Error = Dict[str, Any]


class UsersAPI:
    """Client for interacting with the Users API."""

    def __init__(
        self,
        *,
        base_url: str,
        prefix: str = "/users",
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the service, e.g. ``http://localhost:3000``.
            prefix: Path under which the users routes are mounted.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per-request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.prefix = "/" + prefix.strip("/") if prefix.strip("/") else ""
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Tuple[Optional[Any], Optional[Error]]:
        """Perform an HTTP request and unwrap the response envelope.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PATCH``, ``DELETE``).
            path: Path relative to the users prefix (e.g. ``/get/1``).
            params: Query parameters to include in the request.
            json_body: JSON body to send with the request.
        Returns:
            A tuple ``(result, error)``.  ``result`` is the envelope's
            ``result`` member (``None`` for a bare acknowledgment).
        """
        url = f"{self.base_url}{self.prefix}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            error = self._error_from_response(exc.response, exc)
            logger.error("API request failed (%s): %s", error["status_code"], error["message"])
            return None, error
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

        if not response.content:
            return None, None
        try:
            body = response.json()
        except ValueError:
            return None, {"status_code": response.status_code, "message": "Response is not valid JSON"}
        if isinstance(body, dict) and body.get("success") is False:
            return None, self._error_from_response(response, None)
        if isinstance(body, dict):
            return body.get("result"), None
        return body, None

    @staticmethod
    def _error_from_response(response: Optional[requests.Response], exc: Optional[Exception]) -> Error:
        """Build an error dictionary from a failed response envelope."""
        status = response.status_code if response is not None else None
        error: Error = {"status_code": status, "message": ""}
        if response is not None:
            try:
                result = (response.json() or {}).get("result") or {}
            except (ValueError, AttributeError):
                result = {}
                error["message"] = response.text
            if isinstance(result, dict):
                if result.get("error"):
                    error["message"] = str(result["error"])
                if result.get("errors"):
                    error["errors"] = result["errors"]
                    if not error["message"]:
                        error["message"] = "; ".join(
                            str(item.get("message", item)) if isinstance(item, dict) else str(item)
                            for item in result["errors"]
                        )
        if not error["message"]:
            error["message"] = str(exc) if exc is not None else "Request failed"
        return error

    # ------------------------------------------------------------------
    # User operations
    # ------------------------------------------------------------------
    def create_user(self, full_name: str, role: str, efficiency: int) -> Tuple[Optional[int], Optional[Error]]:
        """Create a user.

        Returns:
            A tuple ``(user_id, error)``.
        """
        data, error = self._request(
            "POST",
            "/create",
            json_body={"full_name": full_name, "role": role, "efficiency": efficiency},
        )
        if error:
            return None, error
        return (data or {}).get("id"), None

    def list_users(self, role: Optional[str] = None) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        """Retrieve all users, or only those with the given role.

        Returns:
            A tuple ``(users, error)``.  ``users`` is empty on failure.
        """
        params = {"role": role} if role else None
        data, error = self._request("GET", "/get", params=params)
        if error:
            return [], error
        return list((data or {}).get("users", [])), None

    def get_user(self, user_id: int) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Retrieve a single user by ID."""
        data, error = self._request("GET", f"/get/{user_id}")
        if error:
            return None, error
        return (data or {}).get("user"), None

    def update_user(self, user_id: int, **fields: Any) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Update ``full_name``, ``role`` and/or ``efficiency`` of a user.

        Only keyword arguments that are not ``None`` are sent.

        Returns:
            A tuple ``(user, error)`` where ``user`` is the row as stored
            after the update.
        """
        payload = {key: value for key, value in fields.items() if value is not None}
        return self._request("PATCH", f"/update/{user_id}", json_body=payload)

    def delete_user(self, user_id: Optional[int] = None) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Delete one user, or every user when ``user_id`` is omitted.

        Returns:
            A tuple ``(deleted, error)``.  ``deleted`` is the removed row
            for a single delete and ``None`` for delete-all.
        """
        path = "/delete" if user_id is None else f"/delete/{user_id}"
        return self._request("DELETE", path)

from __future__ import annotations

import os
from contextlib import ExitStack
from typing import Any

from .config_types import api_root_from_env
from .credentials import CredentialProvider
from .errors import ApiError
from .transport import create_transports


def _unwrap(data: Any) -> Any:
    """Strip the backend ``{success, data, error}`` envelope."""
    if isinstance(data, dict) and "data" in data:
        return data["data"]
    return data


def _as_items(data: Any) -> dict[str, Any]:
    if isinstance(data, dict):
        items = data.get("data")
        if isinstance(items, list):
            out = {k: v for k, v in data.items() if k not in ("data", "success")}
            out["items"] = items
            return out
        return data
    if isinstance(data, list):
        return {"items": data}
    return {"raw": data}


def _as_dict(data: Any) -> dict[str, Any]:
    data = _unwrap(data)
    return data if isinstance(data, dict) else {"raw": data}


def _params(**kwargs: Any) -> dict[str, Any]:
    return {k: v for k, v in kwargs.items() if v is not None and v != ""}


class QcClient:
    """Client for the quality-control backend.

    Holds one scoped transport (``<root>/api``) and one direct transport
    (``<root>``) for its whole lifetime.
    """

    def __init__(
            self,
            root: str | None,
            credentials: CredentialProvider,
            *,
            client_version: str | None = None,
            transport=None,
    ):
        self.root = (root or api_root_from_env()).rstrip("/")
        self.credentials = credentials
        self.api, self.direct = create_transports(
            self.root,
            credentials,
            client_version=client_version,
            transport=transport,
        )

    def close(self) -> None:
        self.api.close()
        self.direct.close()

    # --- auth ---
    def auth_login(self, *, name: str, password: str) -> str:
        data = self.api.request("POST", "/auth/login", json_body={"name": name, "password": password})
        if isinstance(data, dict):
            token = data.get("token") or data.get("access_token")
            if isinstance(token, str) and token:
                return token
        raise ApiError(500, "auth login returned no token", None, data)

    def auth_register(self, *, name: str, email: str, password: str, role: str | None = None,
                      department: str | None = None) -> dict[str, Any]:
        body = _params(name=name, email=email, password=password, role=role, department=department)
        data = self.api.request("POST", "/auth/register", json_body=body)
        return data if isinstance(data, dict) else {"raw": data}

    def auth_logout(self) -> dict[str, Any]:
        return _as_dict(self.direct.request("GET", "/api/auth/logout"))

    def me(self) -> dict[str, Any]:
        return _as_dict(self.direct.request("GET", "/api/auth/me"))

    def forgot_password(self, *, email: str) -> dict[str, Any]:
        data = self.api.request("POST", "/auth/forgot-password", json_body={"email": email})
        return data if isinstance(data, dict) else {"raw": data}

    def reset_password(self, reset_token: str, *, password: str) -> dict[str, Any]:
        data = self.api.request("PUT", f"/auth/reset-password/{reset_token}", json_body={"password": password})
        return data if isinstance(data, dict) else {"raw": data}

    # --- defects ---
    def defects_list(
            self,
            *,
            product: str | None = None,
            type: str | None = None,
            severity: str | None = None,
            inspection: str | None = None,
            status: str | None = None,
            root_cause: str | None = None,
            start_date: str | None = None,
            end_date: str | None = None,
            sort: str | None = None,
            page: int | None = None,
            limit: int | None = None,
    ) -> dict[str, Any]:
        params = _params(
            product=product,
            type=type,
            severity=severity,
            inspection=inspection,
            status=status,
            rootCause=root_cause,
            startDate=start_date,
            endDate=end_date,
            sort=sort,
            page=page,
            limit=limit,
        )
        return _as_items(self.api.request("GET", "/defects", params=params or None))

    def defect_get(self, defect_id: str) -> dict[str, Any]:
        return _as_dict(self.api.request("GET", f"/defects/{defect_id}"))

    def defect_create(self, body: dict[str, Any]) -> dict[str, Any]:
        return _as_dict(self.api.request("POST", "/defects", json_body=body))

    def defect_update(self, defect_id: str, body: dict[str, Any]) -> dict[str, Any]:
        return _as_dict(self.api.request("PUT", f"/defects/{defect_id}", json_body=body))

    def defect_delete(self, defect_id: str) -> dict[str, Any]:
        return _as_dict(self.api.request("DELETE", f"/defects/{defect_id}"))

    # --- inspections ---
    def inspections_list(self, *, limit: int | None = None) -> dict[str, Any]:
        return _as_items(self.api.request("GET", "/inspections", params=_params(limit=limit) or None))

    def inspection_create(self, body: dict[str, Any]) -> dict[str, Any]:
        return _as_dict(self.api.request("POST", "/inspections", json_body=body))

    def inspection_update(self, inspection_id: str, body: dict[str, Any]) -> dict[str, Any]:
        return _as_dict(self.api.request("PUT", f"/inspections/{inspection_id}", json_body=body))

    def inspection_delete(self, inspection_id: str) -> dict[str, Any]:
        return _as_dict(self.api.request("DELETE", f"/inspections/{inspection_id}"))

    def inspection_upload_images(self, inspection_id: str, image_paths: list[str]) -> dict[str, Any]:
        with ExitStack() as stack:
            files = [
                ("images", (os.path.basename(p), stack.enter_context(open(p, "rb"))))
                for p in image_paths
            ]
            data = self.api.request("POST", f"/inspections/{inspection_id}/images", files=files)
        return _as_dict(data)

    def products_list(self, *, limit: int | None = None) -> dict[str, Any]:
        return _as_items(self.api.request("GET", "/products", params=_params(limit=limit) or None))

    # --- users ---
    def users_list(self) -> dict[str, Any]:
        return _as_items(self.direct.request("GET", "/api/users"))

    def user_get(self, user_id: str) -> dict[str, Any]:
        return _as_dict(self.direct.request("GET", f"/api/users/{user_id}"))

    def user_create(self, body: dict[str, Any]) -> dict[str, Any]:
        return _as_dict(self.direct.request("POST", "/api/users", json_body=body))

    def user_update(self, user_id: str, body: dict[str, Any], *, photo: str | None = None) -> dict[str, Any]:
        if not photo:
            return _as_dict(self.direct.request("PUT", f"/api/users/{user_id}", json_body=body))
        fields = {k: str(v) for k, v in body.items() if v is not None}
        with open(photo, "rb") as f:
            data = self.direct.request(
                "PUT",
                f"/api/users/{user_id}",
                data=fields,
                files={"profilePhoto": (os.path.basename(photo), f)},
            )
        return _as_dict(data)

    def user_delete(self, user_id: str) -> dict[str, Any]:
        return _as_dict(self.direct.request("DELETE", f"/api/users/{user_id}"))

    # --- activities / analytics ---
    def activities_list(self, *, limit: int | None = None) -> dict[str, Any]:
        return _as_items(self.api.request("GET", "/activities", params=_params(limit=limit) or None))

    def activity_log(self, *, action: str, description: str, metadata: dict[str, Any] | None = None) -> dict[
        str, Any]:
        body: dict[str, Any] = {"action": action, "description": description}
        if metadata:
            body["metadata"] = metadata
        return _as_dict(self.api.request("POST", "/activities", json_body=body))

    def analytics(self) -> dict[str, Any]:
        return _as_dict(self.api.request("GET", "/analytics"))

    # --- AI detection ---
    def ai_data(self) -> dict[str, Any]:
        return _as_items(self.direct.request("GET", "/api/ai/data"))

    def ai_detect(self, image_path: str) -> dict[str, Any]:
        with open(image_path, "rb") as f:
            data = self.direct.request(
                "POST",
                "/api/ai/detect",
                files={"image": (os.path.basename(image_path), f)},
            )
        return _as_dict(data)

"""CTFd REST API client: user listing and per-user detail records."""
from typing import List, Optional

import requests
from pydantic import BaseModel, ValidationError

from .exceptions import CTFdError
from .logging_utils import get_logger
from .models import UserDetailResponse, UserListResponse, UserRecord


class CTFdClient:
    """Synchronous CTFd API client authenticated with an admin token."""

    def __init__(
        self,
        base_url: str,
        token: str,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        follow_pagination: bool = False,
        max_pages: int = 1000,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout
        self.follow_pagination = follow_pagination
        self.max_pages = max_pages

    @classmethod
    def from_config(cls, config, session: Optional[requests.Session] = None) -> "CTFdClient":
        return cls(
            config["CTFD_URL"],
            config["CTFD_TOKEN"],
            session=session,
            timeout=config.http_timeout,
            follow_pagination=config["CTFD_FOLLOW_PAGINATION"],
            max_pages=config["CTFD_MAX_PAGES"],
        )

    @property
    def headers(self) -> dict:
        return {
            "Authorization": f"Token {self.token}",
            "Content-Type": "application/json",
        }

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _get(self, path: str, schema, error_message: str, params: Optional[dict] = None) -> BaseModel:
        """GET a path under the API root and validate the JSON body against schema."""
        url = f"{self.base_url}{path}"
        try:
            with self.session.get(url, headers=self.headers, params=params, timeout=self.timeout) as resp:
                resp.raise_for_status()
                payload = resp.json()
        except requests.RequestException as e:
            raise CTFdError(error_message, e) from e
        except ValueError as e:
            # Body was not valid JSON
            raise CTFdError(error_message, e) from e

        try:
            return schema.model_validate(payload)
        except ValidationError as e:
            raise CTFdError(error_message, e) from e

    def list_user_ids(self) -> List[int]:
        """Return the ids of every user the listing endpoint exposes.

        Hidden and banned accounts are filtered by CTFd itself.

        Unless follow_pagination is set, every request targets the first page,
        so the loop only ends once that page reports no next page. max_pages
        bounds the loop either way.
        """
        user_ids = []
        page = 1

        while True:
            if page > self.max_pages:
                raise CTFdError(
                    "Error getting users",
                    RuntimeError(f"pagination did not terminate after {self.max_pages} pages"),
                )

            params = {"page": page} if self.follow_pagination else None
            listing = self._get("/api/v1/users", UserListResponse, "Error getting users", params=params)
            user_ids.extend(user.id for user in listing.data)
            get_logger().debug(f"Fetched user page {page}: {len(listing.data)} users")

            if not listing.has_next:
                break
            page += 1

        return user_ids

    def get_user_record(self, user_id: int) -> UserRecord:
        """Fetch one user's detail and reduce it to a sheet row record."""
        detail = self._get(
            f"/api/v1/users/{user_id}",
            UserDetailResponse,
            f"Error getting user data for user {user_id}",
        )
        return UserRecord.from_detail(detail.data)

    def get_user_records(self, user_ids: List[int]) -> List[UserRecord]:
        return [self.get_user_record(user_id) for user_id in user_ids]

"""Trello API client with rate limiting and retry logic."""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from pathlib import Path
from typing import Any

import requests

from trellokit.config import DEFAULT_HOST
from trellokit.exceptions import (
    TrelloAPIError,
    TrelloAuthenticationError,
    TrelloDecodeError,
    TrelloNotFoundError,
    TrelloRateLimitError,
    TrelloServerError,
)
from trellokit.models import Attachment, Board, Card, Label, TrelloList
from trellokit.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

RETRY_STATUSES = {429, 500, 502, 503, 504}
SERVER_ERROR_STATUSES = {500, 502, 503, 504}
IDEMPOTENT_METHODS = {"GET", "PUT", "DELETE"}


def _bool_param(value: bool) -> str:
    return "true" if value else "false"


def _response_details(error: requests.HTTPError) -> tuple[int, str]:
    # A Response with an error status is falsy, so compare against None
    response = error.response
    if response is None:
        return 0, ""
    return response.status_code, response.text or ""


class TrelloClient:
    """Typed access to the Trello REST API with rate limiting

    Trello API rate limits (per token):
    - 100 requests per 10 seconds = 10 req/sec sustained

    Every request is signed with the API key and token, throttled through a
    shared token bucket, and retried with exponential backoff on transient
    failures. Non-2xx responses surface as TrelloAPIError subclasses.
    """

    max_retries = 3
    base_delay = 1.0

    def __init__(
        self,
        api_key: str,
        token: str,
        host: str = DEFAULT_HOST,
        verify_ssl: bool = True,
        timeout: float = 30.0,
        rate_limiter: RateLimiter | None = None,
    ):
        self.api_key = api_key
        self.token = token
        self.host = host.rstrip("/")
        self.verify_ssl = verify_ssl
        self.timeout = timeout

        # Conservative limit to respect Trello's 100 req/10sec token limit
        self.rate_limiter = rate_limiter or RateLimiter(requests_per_second=10.0, burst_allowance=10)

    # ===== Transport =====

    def _signed_params(self, params: dict[str, Any] | None = None) -> dict[str, Any]:
        signed: dict[str, Any] = {"key": self.api_key, "token": self.token}
        if params:
            signed.update(params)
        return signed

    def get_trello_url(self, path: str, params: dict[str, Any] | None = None) -> str:
        """Build a signed URL for ``path`` (e.g. ``/1/boards/abc``) with extra query params"""
        prepared = requests.Request(
            "GET", f"{self.host}{path}", params=self._signed_params(params)
        ).prepare()
        return str(prepared.url)

    def _http_error(self, status_code: int, response_text: str, path: str, retried: bool) -> TrelloAPIError:
        """Map an HTTP failure to the matching TrelloAPIError subclass"""
        if status_code == 401:
            return TrelloAuthenticationError(
                "Invalid API credentials. Check your TRELLO_API_KEY and TRELLO_TOKEN.\n"
                "Get credentials at: https://trello.com/power-ups/admin",
                status_code=status_code,
                response_text=response_text,
            )
        if status_code == 403:
            return TrelloAuthenticationError(
                f"Access forbidden to resource: {path}\n"
                "Your API token may not have permission to access it.",
                status_code=status_code,
                response_text=response_text,
            )
        if status_code == 404:
            return TrelloNotFoundError(
                f"Resource not found: {path}",
                status_code=status_code,
                response_text=response_text,
            )
        suffix = f" after {self.max_retries} attempts" if retried else ""
        if status_code == 429:
            return TrelloRateLimitError(
                f"Rate limit exceeded{suffix}.\n"
                "Trello's API rate limit: 100 requests per 10 seconds.",
                status_code=status_code,
                response_text=response_text,
            )
        if status_code in SERVER_ERROR_STATUSES:
            return TrelloServerError(
                f"Trello server error (HTTP {status_code}){suffix} for {path}",
                status_code=status_code,
                response_text=response_text,
            )
        return TrelloAPIError(
            f"HTTP {status_code} error for {path}: {response_text[:200]}",
            status_code=status_code,
            response_text=response_text,
        )

    @staticmethod
    def _decode_json(response: requests.Response, path: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise TrelloDecodeError(
                f"Invalid JSON in response from {path}: {e}",
                status_code=response.status_code,
                response_text=response.text[:200],
            ) from e

    def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
        expect_json: bool = True,
    ) -> Any:
        """Make an authenticated request with rate limiting and retry logic

        429 responses are retried for every method. Server errors and network
        failures are retried only for idempotent methods.
        """
        if not self.rate_limiter.acquire(timeout=30.0):
            raise RuntimeError("Rate limiter timeout - too many requests queued")

        url = f"{self.host}{path}"
        signed = self._signed_params(params)
        idempotent = method in IDEMPOTENT_METHODS

        for attempt in range(self.max_retries):
            is_last = attempt == self.max_retries - 1
            logger.debug("%s %s (attempt %d)", method, path, attempt + 1)
            try:
                response = requests.request(
                    method,
                    url,
                    params=signed,
                    data=data,
                    files=files,
                    timeout=self.timeout,
                    verify=self.verify_ssl,
                )
                response.raise_for_status()

            except requests.HTTPError as e:
                status_code, response_text = _response_details(e)
                retryable = status_code == 429 or (idempotent and status_code in RETRY_STATUSES)
                if not retryable:
                    raise self._http_error(status_code, response_text, path, retried=False) from e
                if is_last:
                    raise self._http_error(status_code, response_text, path, retried=True) from e

            except requests.RequestException as e:
                # Network errors, timeouts, etc.
                if not idempotent or is_last:
                    raise TrelloAPIError(
                        f"Network error after {attempt + 1} attempt(s): {e}\n"
                        "Check your internet connection and try again.",
                    ) from e

            else:
                if not expect_json:
                    return None
                return self._decode_json(response, path)

            delay = self.base_delay * (2**attempt)  # 1s, 2s, 4s
            logger.warning("%s %s failed, retrying in %.0fs", method, path, delay)
            time.sleep(delay)

        raise RuntimeError("Request failed after retries")

    def validate_credentials(self) -> dict:
        """Verify the API key and token by fetching the authenticated member.

        Raises:
            TrelloAuthenticationError: If API credentials are invalid
            TrelloAPIError: If other API errors occur
        """
        member = self._request("GET", "/1/members/me", {"fields": "id,username,fullName"})
        if not isinstance(member, dict):
            raise TrelloDecodeError("Unexpected member payload", response_text=str(member)[:200])
        return member

    # ===== Boards =====

    def get_boards(self) -> list[Board]:
        """All open boards of the authenticated member"""
        data = self._request(
            "GET", "/1/members/me/boards", {"filter": "open", "fields": Board.fields_param()}
        )
        return Board.from_json_list(data)

    def get_board(self, board_id: str) -> Board:
        data = self._request("GET", f"/1/boards/{board_id}", {"fields": Board.fields_param()})
        return Board.from_json(data)

    def create_board(self, name: str) -> Board:
        return Board.from_json(self._request("POST", "/1/boards/", data={"name": name}))

    def open_board(self, board_id: str) -> Board:
        """Reopen (unarchive) a board"""
        data = self._request("PUT", f"/1/boards/{board_id}", data={"closed": "false"})
        return Board.from_json(data)

    def update_board(self, board: Board) -> Board:
        data = self._request(
            "PUT",
            f"/1/boards/{board.id}/",
            data={"name": board.name, "closed": _bool_param(board.closed)},
        )
        return Board.from_json(data)

    def get_board_labels(self, board_id: str) -> list[Label]:
        data = self._request(
            "GET", f"/1/boards/{board_id}/labels", {"fields": Label.fields_param()}
        )
        return Label.from_json_list(data)

    def get_board_lists(self, board_id: str, cards: bool = False) -> list[TrelloList]:
        """Lists of a board, optionally with their open cards embedded"""
        params = {"fields": TrelloList.fields_param()}
        if cards:
            params["cards"] = "open"
        data = self._request("GET", f"/1/boards/{board_id}/lists", params)
        return TrelloList.from_json_list(data)

    def fetch_nested(self, board: Board) -> Board:
        """Return a copy of ``board`` with its lists and their open cards populated.

        ``board`` itself is left untouched.
        """
        lists = self.get_board_lists(board.id, cards=True)
        logger.debug("Fetched %d list(s) for board %s", len(lists), board.id)
        return replace(board, lists=lists)

    # ===== Lists =====

    def create_list(self, board_id: str, name: str) -> TrelloList:
        data = self._request("POST", "/1/lists/", data={"name": name, "idBoard": board_id})
        return TrelloList.from_json(data)

    def open_list(self, list_id: str) -> TrelloList:
        data = self._request("PUT", f"/1/lists/{list_id}", data={"closed": "false"})
        return TrelloList.from_json(data)

    def update_list(self, trello_list: TrelloList) -> TrelloList:
        data = self._request(
            "PUT",
            f"/1/lists/{trello_list.id}/",
            data={"name": trello_list.name, "closed": _bool_param(trello_list.closed)},
        )
        return TrelloList.from_json(data)

    def get_list_cards(self, list_id: str) -> list[Card]:
        data = self._request("GET", f"/1/lists/{list_id}/cards/", {"fields": Card.fields_param()})
        return Card.from_json_list(data)

    # ===== Cards =====

    def get_card(self, card_id: str) -> Card:
        data = self._request("GET", f"/1/cards/{card_id}", {"fields": Card.fields_param()})
        return Card.from_json(data)

    def create_card(self, list_id: str, card: Card) -> Card:
        data = self._request(
            "POST",
            "/1/cards/",
            data={"name": card.name, "desc": card.desc, "idList": list_id},
        )
        return Card.from_json(data)

    def open_card(self, card_id: str) -> Card:
        data = self._request("PUT", f"/1/cards/{card_id}", data={"closed": "false"})
        return Card.from_json(data)

    def update_card(self, card: Card) -> Card:
        data = self._request(
            "PUT",
            f"/1/cards/{card.id}/",
            data={"name": card.name, "desc": card.desc, "closed": _bool_param(card.closed)},
        )
        return Card.from_json(data)

    def apply_label(self, card_id: str, label_id: str) -> None:
        self._request(
            "POST", f"/1/cards/{card_id}/idLabels", data={"value": label_id}, expect_json=False
        )

    def remove_label(self, card_id: str, label_id: str) -> None:
        self._request("DELETE", f"/1/cards/{card_id}/idLabels/{label_id}", expect_json=False)

    # ===== Attachments =====

    def apply_attachment(self, card_id: str, file_path: str | Path) -> Attachment:
        """Upload a local file as a card attachment"""
        path = Path(file_path)
        # Bytes, not a file object, so a retried request resends the whole file
        content = path.read_bytes()
        data = self._request(
            "POST", f"/1/cards/{card_id}/attachments", files={"file": (path.name, content)}
        )
        return Attachment.from_json(data)

    def get_card_attachments(self, card_id: str) -> list[Attachment]:
        data = self._request(
            "GET", f"/1/cards/{card_id}/attachments", {"fields": Attachment.fields_param()}
        )
        return Attachment.from_json_list(data)

"""WordPress REST API adapter for the content repository.

Pages live in a custom post type (``local`` by default). The topic key and
SEO fields are stored as post meta, which the site must expose through the
REST API (``show_in_rest``) for lookups to work.
"""

from __future__ import annotations

import base64
import logging
from typing import Any, Dict, List, Mapping, Optional

import requests

from .models import PageRecord
from .repository import ContentRepository, RepositoryError

LOGGER = logging.getLogger(__name__)

_PAGE_SIZE = 100
_TIMEOUT = 30
_STATUSES = "publish,future,draft,pending,private"

REGION_META = "_local_page_state"
SUB_REGION_META = "_local_page_city"

# Logical meta names used by the orchestrator -> stored meta keys.
META_KEYS = {
    "page_type": "_local_page_type",
    "generated_at": "_local_page_generated",
    "seo_title": "_genesis_title",
    "seo_description": "_genesis_description",
    "structured_data": "schema",
}


def _rendered(value: Any) -> str:
    if isinstance(value, dict):
        return value.get("raw") or value.get("rendered") or ""
    return value or ""


class WordPressRepository(ContentRepository):
    """Content repository backed by the WordPress REST API."""

    def __init__(
        self,
        wp_url: str,
        username: str,
        app_password: str,
        post_type: str = "local",
        session: Optional[requests.Session] = None,
    ):
        if not wp_url:
            raise RepositoryError("WordPress URL is required")
        self.endpoint = f"{wp_url.rstrip('/')}/wp-json/wp/v2/{post_type}"
        credentials = f"{username}:{app_password}"
        token = base64.b64encode(credentials.encode()).decode("utf-8")
        self.headers = {"Authorization": f"Basic {token}"}
        self.session = session or requests.Session()

    def _request(self, method: str, url: str, **kwargs):
        try:
            return self.session.request(method, url, headers=self.headers, timeout=_TIMEOUT, **kwargs)
        except requests.exceptions.RequestException as exc:
            raise RepositoryError(f"WordPress request failed: {exc}") from exc

    @staticmethod
    def _check(response, action: str) -> Any:
        if response.status_code in [200, 201]:
            try:
                return response.json()
            except ValueError as exc:
                raise RepositoryError(f"Invalid JSON from WordPress while trying to {action}") from exc
        raise RepositoryError(
            f"Failed to {action}: {response.status_code} - {response.text[:300]}",
            status_code=response.status_code,
        )

    @staticmethod
    def to_record(item: Mapping[str, Any]) -> PageRecord:
        meta = item.get("meta") or {}
        sub_region = meta.get(SUB_REGION_META) or None
        logical = {name: meta[key] for name, key in META_KEYS.items() if meta.get(key) not in (None, "")}
        return PageRecord(
            id=int(item["id"]),
            region=meta.get(REGION_META) or "",
            sub_region=sub_region,
            title=_rendered(item.get("title")),
            body=_rendered(item.get("content")),
            excerpt=_rendered(item.get("excerpt")),
            slug=item.get("slug") or "",
            parent_id=item.get("parent") or None,
            meta=logical,
        )

    @staticmethod
    def to_payload(fields: Mapping[str, Any]) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if "title" in fields:
            payload["title"] = fields["title"]
        if "body" in fields:
            payload["content"] = fields["body"]
        if "excerpt" in fields:
            payload["excerpt"] = fields["excerpt"]
        if fields.get("slug"):
            payload["slug"] = fields["slug"]
        if "parent_id" in fields:
            payload["parent"] = fields["parent_id"] or 0
        meta: Dict[str, Any] = {}
        if fields.get("region"):
            meta[REGION_META] = fields["region"]
        if fields.get("sub_region"):
            meta[SUB_REGION_META] = fields["sub_region"]
        for name, value in (fields.get("meta") or {}).items():
            meta[META_KEYS.get(name, name)] = value
        if meta:
            payload["meta"] = meta
        return payload

    def list_all(self) -> List[PageRecord]:
        records: List[PageRecord] = []
        page = 1
        while True:
            response = self._request(
                "GET",
                self.endpoint,
                params={"per_page": _PAGE_SIZE, "page": page, "status": _STATUSES, "context": "edit"},
            )
            # WordPress answers 400 once the page number runs past the last page.
            if response.status_code == 400 and page > 1:
                break
            items = self._check(response, "list pages")
            if not items:
                break
            records.extend(self.to_record(item) for item in items if (item.get("meta") or {}).get(REGION_META))
            total_pages = int(response.headers.get("X-WP-TotalPages", 1))
            if page >= total_pages:
                break
            page += 1
        return records

    def find(self, region: str, sub_region: Optional[str] = None) -> Optional[PageRecord]:
        for record in self.list_all():
            if record.region == region and record.sub_region == sub_region:
                return record
        return None

    def create(self, fields: Mapping[str, Any]) -> int:
        payload = self.to_payload(fields)
        payload["status"] = "publish"
        created = self._check(self._request("POST", self.endpoint, json=payload), "create page")
        page_id = int(created.get("id") or 0)
        if not page_id:
            raise RepositoryError("WordPress did not return an id for the created page")
        return page_id

    def update(self, page_id: int, fields: Mapping[str, Any]) -> bool:
        payload = self.to_payload(fields)
        self._check(self._request("POST", f"{self.endpoint}/{page_id}", json=payload), f"update page {page_id}")
        return True

    def delete(self, page_id: int) -> bool:
        response = self._request("DELETE", f"{self.endpoint}/{page_id}", params={"force": "true"})
        if response.status_code in (404, 410):
            return False
        self._check(response, f"delete page {page_id}")
        return True


__all__ = ["WordPressRepository"]

"""Search of the npm registry for Yeoman generators."""

from __future__ import annotations

import logging
from typing import Any

import requests

from yeoman_mcp_server.config import DEFAULT_REGISTRY_URL
from yeoman_mcp_server.errors import raise_mcp_error

logger = logging.getLogger(__name__)

GENERATOR_KEYWORD = "yeoman-generator"


def build_search_text(query: str) -> str:
    """Combine the generator keyword with comma-separated caller keywords."""
    keywords = [GENERATOR_KEYWORD]
    keywords.extend(part.strip() for part in query.split(",") if part.strip())
    return f"keywords:{','.join(keywords)}"


def _is_generator(item: Any) -> bool:
    if not isinstance(item, dict) or not isinstance(item.get("package"), dict):
        return False
    keywords = item["package"].get("keywords")
    return isinstance(keywords, list) and GENERATOR_KEYWORD in keywords


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _project(item: dict[str, Any]) -> dict[str, Any]:
    package = item["package"]
    publisher = _mapping(package.get("publisher"))
    downloads = _mapping(item.get("downloads"))
    return {
        "name": package.get("name"),
        "description": package.get("description"),
        "url": _mapping(package.get("links")).get("npm"),
        "version": package.get("version"),
        "author": publisher.get("username") or "Unknown",
        "search_score": item.get("searchScore"),
        "downloads": {
            "monthly": downloads.get("monthly"),
            "weekly": downloads.get("weekly"),
        },
        "license": package.get("license"),
    }


class TemplateSearch:
    """Thin client for the npm registry search endpoint."""

    def __init__(
        self,
        registry_url: str = DEFAULT_REGISTRY_URL,
        *,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self._registry_url = registry_url
        self._timeout = timeout
        self._session = session

    def search(self, query: str, page_size: int = 20) -> list[dict[str, Any]]:
        """Return at most ``page_size`` generators matching ``query``.

        Packages that do not actually carry the ``yeoman-generator`` keyword are
        dropped even if the registry returned them.
        """
        params = {"text": build_search_text(query), "size": page_size}
        get = self._session.get if self._session is not None else requests.get
        try:
            response = get(self._registry_url, params=params, timeout=self._timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as exc:
            logger.error("npm registry search failed: %s", exc)
            raise_mcp_error(
                "SearchError", f"Failed to search the npm registry: {exc}", str(exc)
            )
        except ValueError as exc:
            raise_mcp_error(
                "SearchError", "npm registry returned a malformed response", str(exc)
            )

        objects = data.get("objects") if isinstance(data, dict) else None
        if not isinstance(objects, list):
            objects = []
        generators = [_project(item) for item in objects if _is_generator(item)]
        logger.info(
            "Registry search '%s' matched %d generators", query, len(generators)
        )
        return generators[:page_size]

from typing import Final, TypeVar
from urllib.parse import quote

import httpx
import pydantic

from cratesapi import errors
from cratesapi.logger import log, set_log_level
from cratesapi.models import (
    CategoriesPageModel,
    CategoryModel,
    CategoryResponseModel,
    CrateResponseModel,
    CratesPageModel,
    DependenciesModel,
    DownloadsModel,
    KeywordModel,
    KeywordResponseModel,
    KeywordsPageModel,
    OwnersModel,
    SummaryModel,
)
from cratesapi.query import Query, parse_query
from cratesapi.ratelimit import RateLimiter
from cratesapi.settings import Settings, settings

__all__ = [
    "BASE_URL",
    "Client",
]


BASE_URL: Final = "https://crates.io/api/v1"

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)


def _segment(value: str, what: str) -> str:
    """Escape an identifier so it stays a single path segment."""
    if not value:
        raise ValueError(f"{what} must not be empty")
    if value in (".", ".."):
        raise ValueError(f"{what} must not be {value!r}")
    return quote(value, safe="")


def _page_params(page: int | None, per_page: int | None) -> list[tuple[str, str]]:
    return Query(page=page, per_page=per_page).to_params()


class Client:
    """
    Synchronous client for the crates.io read-only API.

    crates.io requires a descriptive user-agent, for example::

        my_crawler (my_crawler.com/info)
        my_crawler (help@my_crawler.com)
        my_crawler (github.com/me/my_crawler)

    Every request waits until at least RATE_LIMIT seconds passed since the
    previous request of this client. A client is not safe for concurrent use
    without external locking around each call.
    """

    def __init__(
        self,
        user_agent: str,
        *,
        base_url: str = BASE_URL,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not user_agent or not user_agent.strip():
            raise errors.ClientConfigError(
                "crates.io requires a non-empty, descriptive user-agent"
            )

        self.user_agent = user_agent
        self.base_url = base_url.rstrip("/")
        self._rate_limiter = RateLimiter()
        self._http = httpx.Client(
            base_url=self.base_url,
            headers={
                "User-Agent": user_agent,
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
            # readme downloads are redirected to the static file host
            follow_redirects=True,
        )
        log.info("Initialized crates.io client for %s", self.base_url)

    @classmethod
    def from_settings(
        cls,
        config: Settings | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> "Client":
        """Create a client from CRATESAPI_* environment settings."""
        if config is None:
            config = settings()
        if config.user_agent is None:
            raise errors.ClientConfigError("CRATESAPI_USER_AGENT is not set")
        set_log_level(config.log_level)
        return cls(
            config.user_agent,
            base_url=config.base_url,
            timeout=config.timeout,
            transport=transport,
        )

    def get_crates(self, query: Query | str | None = None) -> CratesPageModel:
        """Get a page of crates matching a query or composite query string."""
        if query is None:
            query = Query()
        elif isinstance(query, str):
            query = parse_query(query)
        response = self._get("/crates", params=query.to_params())
        return self._parse(response, CratesPageModel)

    def get_crate(self, name: str) -> CrateResponseModel:
        name = _segment(name, "crate name")
        response = self._get(f"/crates/{name}", lookup=True)
        return self._parse(response, CrateResponseModel)

    def get_crate_downloads(self, name: str) -> DownloadsModel:
        name = _segment(name, "crate name")
        response = self._get(f"/crates/{name}/downloads", lookup=True)
        return self._parse(response, DownloadsModel)

    def get_crate_owners(self, name: str) -> OwnersModel:
        name = _segment(name, "crate name")
        response = self._get(f"/crates/{name}/owners", lookup=True)
        return self._parse(response, OwnersModel)

    def get_crate_dependencies(self, name: str, version: str) -> DependenciesModel:
        name = _segment(name, "crate name")
        version = _segment(version, "crate version")
        response = self._get(f"/crates/{name}/{version}/dependencies", lookup=True)
        return self._parse(response, DependenciesModel)

    def get_readme(self, name: str, version: str) -> str:
        """Get the rendered readme of a crate version."""
        name = _segment(name, "crate name")
        version = _segment(version, "crate version")
        response = self._get(f"/crates/{name}/{version}/readme", lookup=True)
        return response.text

    def get_categories(
        self, page: int | None = None, per_page: int | None = None
    ) -> CategoriesPageModel:
        response = self._get("/categories", params=_page_params(page, per_page))
        return self._parse(response, CategoriesPageModel)

    def get_category(self, slug: str) -> CategoryModel:
        slug = _segment(slug, "category slug")
        response = self._get(f"/categories/{slug}", lookup=True)
        return self._parse(response, CategoryResponseModel).category

    def get_keywords(
        self, page: int | None = None, per_page: int | None = None
    ) -> KeywordsPageModel:
        response = self._get("/keywords", params=_page_params(page, per_page))
        return self._parse(response, KeywordsPageModel)

    def get_keyword(self, keyword: str) -> KeywordModel:
        keyword = _segment(keyword, "keyword")
        response = self._get(f"/keywords/{keyword}", lookup=True)
        return self._parse(response, KeywordResponseModel).keyword

    def get_summary(self) -> SummaryModel:
        response = self._get("/summary")
        return self._parse(response, SummaryModel)

    def _get(
        self,
        path: str,
        params: list[tuple[str, str]] | None = None,
        *,
        lookup: bool = False,
    ) -> httpx.Response:
        """
        Send one GET request to the API, honoring the rate limit.

        The attempt counts against the rate limit even when it fails.
        A 404 raises NotFoundError for single resource lookups and
        HttpStatusError otherwise.
        """
        self._rate_limiter.acquire()
        log.debug("GET %s%s %s", self.base_url, path, params or "")
        try:
            response = self._http.get(path, params=params or None)
        except httpx.RequestError as e:
            log.warning("Request to %s%s failed: %s", self.base_url, path, e)
            raise errors.TransportError(f"Request failed: {e}") from e

        if response.is_success:
            return response

        url = str(response.url)
        log.warning("GET %s returned HTTP %d", url, response.status_code)
        if lookup and response.status_code == httpx.codes.NOT_FOUND:
            raise errors.NotFoundError(url)
        raise errors.HttpStatusError(response.status_code, url)

    def _parse(self, response: httpx.Response, model: type[ModelT]) -> ModelT:
        try:
            return model.model_validate_json(response.content)
        except pydantic.ValidationError as e:
            raise errors.DeserializationError(
                f"Unexpected {model.__name__} response from {response.url}: {e}"
            ) from e

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

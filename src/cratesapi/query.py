"""
Query construction for the crates listing endpoint.

A query is built either field by field with :class:`Query` or from a
composite string such as ``api category=web sort=update``, where bare
words form the free text search and ``key=value`` tokens set filters.
Recognized keys are ``category``, ``keyword``, ``sort``, ``page`` and
``per_page``. Unknown keys, repeated keys and invalid values are rejected.
"""
import dataclasses
import enum
from typing import Callable, Iterable

from cratesapi.errors import QueryError, QueryParseError

__all__ = [
    "Category",
    "Sorting",
    "Query",
    "parse_query",
]


class Sorting(enum.Enum):
    """Sort orders understood by the registry, values are the wire tokens."""

    ALPHABETICAL = "alpha"
    RELEVANCE = "relevance"
    ALL_TIME_DOWNLOADS = "downloads"
    RECENT_DOWNLOADS = "recent-downloads"
    RECENT_UPDATES = "recent-updates"
    NEWLY_ADDED = "new"

    @classmethod
    def parse(cls, token: str) -> "Sorting":
        """Accept the wire token or a shorthand, fail on anything else."""
        try:
            return _SORTING_ALIASES[token.lower()]
        except KeyError:
            raise ValueError(f"unknown sort order {token!r}") from None


_SORTING_ALIASES: dict[str, Sorting] = {
    **{sorting.value: sorting for sorting in Sorting},
    "alphabet": Sorting.ALPHABETICAL,
    "alphabetic": Sorting.ALPHABETICAL,
    "alphabetical": Sorting.ALPHABETICAL,
    "relevant": Sorting.RELEVANCE,
    "download": Sorting.ALL_TIME_DOWNLOADS,
    "dl": Sorting.ALL_TIME_DOWNLOADS,
    "all-time": Sorting.ALL_TIME_DOWNLOADS,
    "rdl": Sorting.RECENT_DOWNLOADS,
    "new-downloads": Sorting.RECENT_DOWNLOADS,
    "new-updates": Sorting.RECENT_UPDATES,
    "updates": Sorting.RECENT_UPDATES,
    "update": Sorting.RECENT_UPDATES,
    "rup": Sorting.RECENT_UPDATES,
    "newly-added": Sorting.NEWLY_ADDED,
    "newest": Sorting.NEWLY_ADDED,
    "latest": Sorting.NEWLY_ADDED,
}


class Category(enum.Enum):
    """
    Categories available on crates.io, values are the registry slugs.

    The registry can add categories at any time, slugs this enum does not know
    about are represented as ``OTHER`` when reading responses. ``OTHER`` can
    never be used as a filter.
    """

    ACCESSIBILITY = "accessibility"
    ALGORITHMS = "algorithms"
    API_BINDINGS = "api-bindings"
    ASYNCHRONOUS = "asynchronous"
    AUTHENTICATION = "authentication"
    CACHING = "caching"
    COMMAND_LINE_INTERFACE = "command-line-interface"
    COMMAND_LINE_UTILITIES = "command-line-utilities"
    COMPILERS = "compilers"
    COMPRESSION = "compression"
    COMPUTER_VISION = "computer-vision"
    CONCURRENCY = "concurrency"
    CONFIG = "config"
    CRYPTOGRAPHY = "cryptography"
    DATABASE = "database"
    DATABASE_IMPLEMENTATIONS = "database-implementations"
    DATA_STRUCTURES = "data-structures"
    DATE_AND_TIME = "date-and-time"
    DEVELOPMENT_TOOLS = "development-tools"
    EMAIL = "email"
    EMBEDDED = "embedded"
    EMULATORS = "emulators"
    ENCODING = "encoding"
    EXTERNAL_FFI_BINDINGS = "external-ffi-bindings"
    FILESYSTEM = "filesystem"
    GAME_DEVELOPMENT = "game-development"
    GAME_ENGINES = "game-engines"
    GAMES = "games"
    GRAPHICS = "graphics"
    GUI = "gui"
    HARDWARE_SUPPORT = "hardware-support"
    INTERNATIONALIZATION = "internationalization"
    LOCALIZATION = "localization"
    MATHEMATICS = "mathematics"
    MEMORY_MANAGEMENT = "memory-management"
    MULTIMEDIA = "multimedia"
    NETWORK_PROGRAMMING = "network-programming"
    NO_STD = "no-std"
    OS = "os"
    PARSER_IMPLEMENTATIONS = "parser-implementations"
    PARSING = "parsing"
    RENDERING = "rendering"
    RUST_PATTERNS = "rust-patterns"
    SCIENCE = "science"
    SIMULATION = "simulation"
    TEMPLATE_ENGINE = "template-engine"
    TEXT_EDITORS = "text-editors"
    TEXT_PROCESSING = "text-processing"
    VALUE_FORMATTING = "value-formatting"
    VISUALIZATION = "visualization"
    WASM = "wasm"
    WEB_PROGRAMMING = "web-programming"
    OTHER = "other"

    @classmethod
    def parse(cls, token: str) -> "Category":
        """Accept a known slug or a shorthand, fail on anything else."""
        try:
            return _CATEGORY_ALIASES[token.lower()]
        except KeyError:
            raise ValueError(f"unknown category {token!r}") from None

    @classmethod
    def from_slug(cls, slug: str) -> "Category":
        """Map a slug found in a response, unknown slugs become OTHER."""
        try:
            category = cls(slug)
        except ValueError:
            return cls.OTHER
        return category


_CATEGORY_ALIASES: dict[str, Category] = {
    **{
        category.value: category
        for category in Category
        if category is not Category.OTHER
    },
    "access": Category.ACCESSIBILITY,
    "accessible": Category.ACCESSIBILITY,
    "algo": Category.ALGORITHMS,
    "algorithm": Category.ALGORITHMS,
    "algorithmic": Category.ALGORITHMS,
    "bindings": Category.API_BINDINGS,
    "api": Category.API_BINDINGS,
    "async": Category.ASYNCHRONOUS,
    "auth": Category.AUTHENTICATION,
    "authenticate": Category.AUTHENTICATION,
    "cache": Category.CACHING,
    "cli": Category.COMMAND_LINE_INTERFACE,
    "util": Category.COMMAND_LINE_UTILITIES,
    "utility": Category.COMMAND_LINE_UTILITIES,
    "utilities": Category.COMMAND_LINE_UTILITIES,
    "compiler": Category.COMPILERS,
    "compress": Category.COMPRESSION,
    "vision": Category.COMPUTER_VISION,
    "concurrent": Category.CONCURRENCY,
    "cfg": Category.CONFIG,
    "conf": Category.CONFIG,
    "crypto": Category.CRYPTOGRAPHY,
    "db": Category.DATABASE,
    "db-impl": Category.DATABASE_IMPLEMENTATIONS,
    "struct": Category.DATA_STRUCTURES,
    "structs": Category.DATA_STRUCTURES,
    "structures": Category.DATA_STRUCTURES,
    "date": Category.DATE_AND_TIME,
    "time": Category.DATE_AND_TIME,
    "datetime": Category.DATE_AND_TIME,
    "dev-tools": Category.DEVELOPMENT_TOOLS,
    "tools": Category.DEVELOPMENT_TOOLS,
    "mail": Category.EMAIL,
    "embed": Category.EMBEDDED,
    "emulation": Category.EMULATORS,
    "emulate": Category.EMULATORS,
    "encode": Category.ENCODING,
    "encoders": Category.ENCODING,
    "ffi": Category.EXTERNAL_FFI_BINDINGS,
    "fs": Category.FILESYSTEM,
    "filesystems": Category.FILESYSTEM,
    "gamedev": Category.GAME_DEVELOPMENT,
    "game-dev": Category.GAME_DEVELOPMENT,
    "game-engine": Category.GAME_ENGINES,
    "engines": Category.GAME_ENGINES,
    "game": Category.GAMES,
    "ui": Category.GUI,
    "hardware": Category.HARDWARE_SUPPORT,
    "i18n": Category.INTERNATIONALIZATION,
    "localizations": Category.LOCALIZATION,
    "maths": Category.MATHEMATICS,
    "math": Category.MATHEMATICS,
    "memory": Category.MEMORY_MANAGEMENT,
    "mem": Category.MEMORY_MANAGEMENT,
    "media": Category.MULTIMEDIA,
    "net": Category.NETWORK_PROGRAMMING,
    "network": Category.NETWORK_PROGRAMMING,
    "networking": Category.NETWORK_PROGRAMMING,
    "nostd": Category.NO_STD,
    "operating-system": Category.OS,
    "parsers": Category.PARSER_IMPLEMENTATIONS,
    "parse": Category.PARSING,
    "render": Category.RENDERING,
    "patterns": Category.RUST_PATTERNS,
    "scientific": Category.SCIENCE,
    "sci": Category.SCIENCE,
    "sim": Category.SIMULATION,
    "simulators": Category.SIMULATION,
    "template-engines": Category.TEMPLATE_ENGINE,
    "template": Category.TEMPLATE_ENGINE,
    "editors": Category.TEXT_EDITORS,
    "text": Category.TEXT_PROCESSING,
    "processing": Category.TEXT_PROCESSING,
    "formatting": Category.VALUE_FORMATTING,
    "visual": Category.VISUALIZATION,
    "vis": Category.VISUALIZATION,
    "visualize": Category.VISUALIZATION,
    "web": Category.WEB_PROGRAMMING,
}


def _parse_positive_int(value: str) -> int:
    # int() would also take signs, underscores, spaces and non-ASCII digits
    if not (value.isascii() and value.isdigit()):
        raise ValueError(f"expected a positive integer, got {value!r}")
    number = int(value)
    if number < 1:
        raise ValueError(f"expected a positive integer, got {value!r}")
    return number


def _parse_text(value: str) -> str:
    if not value.strip():
        raise ValueError("value must not be blank")
    return value


def _parse_category_slug(value: str) -> Category:
    category = Category(value)
    if category is Category.OTHER:
        raise ValueError("Category.OTHER cannot be used as a filter")
    return category


# Composite string keys, each one is also the name of the Query field it sets
_KEY_PARSERS: dict[str, Callable[[str], object]] = {
    "category": Category.parse,
    "keyword": _parse_text,
    "sort": Sorting.parse,
    "page": _parse_positive_int,
    "per_page": _parse_positive_int,
}

# Registry parameter names, the inverse of Query.to_params
_PARAM_DECODERS: dict[str, tuple[str, Callable[[str], object]]] = {
    "q": ("string", _parse_text),
    "category": ("category", _parse_category_slug),
    "keyword": ("keyword", _parse_text),
    "sort": ("sort", Sorting),
    "page": ("page", _parse_positive_int),
    "per_page": ("per_page", _parse_positive_int),
}


@dataclasses.dataclass(frozen=True)
class Query:
    """
    Options for a single crates listing request, every field is optional.

    - ``string``: free text search, sent as ``q``
    - ``category``: only crates in this category, sent as ``category``
    - ``keyword``: only crates tagged with this keyword, sent as ``keyword``
    - ``sort``: result order, sent as ``sort``
    - ``page``: page number starting at 1, sent as ``page``
    - ``per_page``: number of results per page, sent as ``per_page``

    Category and keyword can be combined, the registry returns crates matching
    both.
    """

    string: str | None = None
    category: Category | None = None
    keyword: str | None = None
    sort: Sorting | None = None
    page: int | None = None
    per_page: int | None = None

    @classmethod
    def parse(cls, text: str) -> "Query":
        return parse_query(text)

    @classmethod
    def from_params(cls, params: Iterable[tuple[str, str]]) -> "Query":
        """Decode registry query parameters as produced by to_params."""
        fields: dict[str, object] = {}
        for key, value in params:
            token = f"{key}={value}"
            if key not in _PARAM_DECODERS:
                raise QueryParseError(token, "unknown parameter")
            field, decode = _PARAM_DECODERS[key]
            if field in fields:
                raise QueryParseError(token, "duplicate parameter")
            try:
                fields[field] = decode(value)
            except ValueError as e:
                raise QueryParseError(token, str(e)) from e
        return cls(**fields)  # type: ignore[arg-type]

    def to_params(self) -> list[tuple[str, str]]:
        """
        Encode the populated fields as registry query parameters.

        The order is always q, category, keyword, sort, page, per_page.
        """
        params: list[tuple[str, str]] = []
        if self.string is not None:
            if not self.string.strip():
                raise QueryError("search string must not be blank")
            params.append(("q", self.string))
        if self.category is not None:
            if self.category is Category.OTHER:
                raise QueryError("Category.OTHER cannot be used as a filter")
            params.append(("category", self.category.value))
        if self.keyword is not None:
            if not self.keyword.strip():
                raise QueryError("keyword must not be blank")
            params.append(("keyword", self.keyword))
        if self.sort is not None:
            params.append(("sort", self.sort.value))
        if self.page is not None:
            if self.page < 1:
                raise QueryError(f"page must be at least 1, got {self.page}")
            params.append(("page", str(self.page)))
        if self.per_page is not None:
            if self.per_page < 1:
                raise QueryError(f"per_page must be at least 1, got {self.per_page}")
            params.append(("per_page", str(self.per_page)))
        return params

    def to_string(self) -> str:
        """
        Render the query in the composite string form read by parse_query.

        Whitespace inside the search string is collapsed to single spaces.
        """
        tokens: list[str] = []
        if self.string is not None:
            if "=" in self.string:
                raise QueryError("search string containing '=' has no string form")
            tokens.extend(self.string.split())
        for key, value in self.to_params():
            if key == "q":
                continue
            if key == "keyword" and len(value.split()) != 1:
                raise QueryError("keyword containing whitespace has no string form")
            tokens.append(f"{key}={value}")
        return " ".join(tokens)


def parse_query(text: str) -> Query:
    """
    Parse a composite query string into a Query.

    ``api category=web sort=update`` searches for "api" in the
    web-programming category, most recently updated crates first.

    A key given twice is an error, the query would otherwise be ambiguous.
    """
    terms: list[str] = []
    fields: dict[str, object] = {}
    for token in text.split():
        if "=" not in token:
            terms.append(token)
            continue

        key, _, value = token.partition("=")
        if key not in _KEY_PARSERS:
            raise QueryParseError(token, f"unknown key {key!r}")
        if key in fields:
            raise QueryParseError(token, f"duplicate key {key!r}")
        if not value:
            raise QueryParseError(token, "missing value")
        try:
            fields[key] = _KEY_PARSERS[key](value)
        except ValueError as e:
            raise QueryParseError(token, str(e)) from e

    if terms:
        fields["string"] = " ".join(terms)
    return Query(**fields)  # type: ignore[arg-type]

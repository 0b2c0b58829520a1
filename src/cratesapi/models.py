import datetime

from pydantic import BaseModel, ConfigDict, Field

from cratesapi.query import Category

__all__ = [
    "MetaModel",
    "CrateLinksModel",
    "CrateModel",
    "CratesPageModel",
    "UserModel",
    "VersionLinksModel",
    "VersionModel",
    "CategoryModel",
    "CategoryResponseModel",
    "CategoriesPageModel",
    "KeywordModel",
    "KeywordResponseModel",
    "KeywordsPageModel",
    "CrateResponseModel",
    "SummaryModel",
    "VersionDownloadsModel",
    "ExtraDownloadsModel",
    "DownloadsMetaModel",
    "DownloadsModel",
    "OwnersModel",
    "DependencyModel",
    "DependenciesModel",
]


class _ResponseModel(BaseModel):
    # Responses are owned by the caller and never change after parsing,
    # unknown fields sent by the registry are ignored.
    model_config = ConfigDict(frozen=True, extra="ignore")


class MetaModel(_ResponseModel):
    total: int
    next_page: str | None = None
    prev_page: str | None = None


class CrateLinksModel(_ResponseModel):
    owner_team: str
    owner_user: str
    owners: str
    reverse_dependencies: str
    version_downloads: str
    versions: str | None = None


class CrateModel(_ResponseModel):
    id: str
    name: str
    description: str | None = None
    license: str | None = None
    documentation: str | None = None
    homepage: str | None = None
    repository: str | None = None
    downloads: int
    recent_downloads: int | None = None
    categories: list[str] | None = None
    keywords: list[str] | None = None
    versions: list[int] | None = None
    max_version: str
    links: CrateLinksModel
    created_at: datetime.datetime
    updated_at: datetime.datetime
    exact_match: bool | None = None

    @property
    def category_kinds(self) -> list[Category]:
        """Categories of the crate, unknown slugs become Category.OTHER."""
        return [Category.from_slug(slug) for slug in self.categories or []]


class CratesPageModel(_ResponseModel):
    """
    API result of a crates listing or search.

    See https://crates.io/data-access
    """

    crates: list[CrateModel]
    meta: MetaModel


class UserModel(_ResponseModel):
    avatar: str | None = None
    email: str | None = None
    id: int
    kind: str | None = None
    login: str
    name: str | None = None
    url: str


class VersionLinksModel(_ResponseModel):
    authors: str | None = None
    dependencies: str
    version_downloads: str


class VersionModel(_ResponseModel):
    crate: str
    created_at: datetime.datetime
    updated_at: datetime.datetime
    dl_path: str
    downloads: int
    features: dict[str, list[str]] = Field(default_factory=dict)
    id: int
    num: str
    yanked: bool
    license: str | None = None
    readme_path: str | None = None
    links: VersionLinksModel
    crate_size: int | None = None
    published_by: UserModel | None = None


class CategoryModel(_ResponseModel):
    id: str
    category: str
    slug: str
    description: str
    crates_cnt: int
    created_at: datetime.datetime
    # Only present when a single category is requested
    subcategories: list["CategoryModel"] | None = None
    parent_categories: list["CategoryModel"] | None = None

    @property
    def kind(self) -> Category:
        return Category.from_slug(self.slug)


class CategoryResponseModel(_ResponseModel):
    category: CategoryModel


class CategoriesPageModel(_ResponseModel):
    categories: list[CategoryModel]
    meta: MetaModel


class KeywordModel(_ResponseModel):
    id: str
    keyword: str
    crates_cnt: int
    created_at: datetime.datetime


class KeywordResponseModel(_ResponseModel):
    keyword: KeywordModel


class KeywordsPageModel(_ResponseModel):
    keywords: list[KeywordModel]
    meta: MetaModel


class CrateResponseModel(_ResponseModel):
    """API result of a single crate lookup."""

    crate: CrateModel
    categories: list[CategoryModel] = Field(default_factory=list)
    keywords: list[KeywordModel] = Field(default_factory=list)
    versions: list[VersionModel] = Field(default_factory=list)


class SummaryModel(_ResponseModel):
    just_updated: list[CrateModel]
    most_downloaded: list[CrateModel]
    new_crates: list[CrateModel]
    most_recently_downloaded: list[CrateModel]
    num_crates: int
    num_downloads: int
    popular_categories: list[CategoryModel]
    popular_keywords: list[KeywordModel]


class VersionDownloadsModel(_ResponseModel):
    date: datetime.date
    downloads: int
    version: int


class ExtraDownloadsModel(_ResponseModel):
    date: datetime.date
    downloads: int


class DownloadsMetaModel(_ResponseModel):
    extra_downloads: list[ExtraDownloadsModel]


class DownloadsModel(_ResponseModel):
    version_downloads: list[VersionDownloadsModel]
    meta: DownloadsMetaModel


class OwnersModel(_ResponseModel):
    users: list[UserModel]


class DependencyModel(_ResponseModel):
    crate_id: str
    default_features: bool
    downloads: int
    features: list[str]
    id: int
    kind: str
    optional: bool
    req: str
    target: str | None = None
    version_id: int


class DependenciesModel(_ResponseModel):
    dependencies: list[DependencyModel]

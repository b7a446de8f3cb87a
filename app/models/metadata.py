from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

# A structured-metadata block serialises to plain JSON-LD, so blocks are
# carried as dicts rather than one model per schema.org type.
SchemaBlock = Dict[str, Any]


class RaceEventData(BaseModel):
    """Facts needed for a SportsEvent block."""

    name: str
    description: Optional[str] = None
    city: str
    country: str
    race_date: Optional[str] = None
    website: Optional[str] = None
    organizer: Optional[str] = None


class ArticleData(BaseModel):
    """Facts needed for an Article/BlogPosting block."""

    headline: str
    description: Optional[str] = None
    url: str
    date_published: str
    date_modified: Optional[str] = None
    author_name: str
    author_url: Optional[str] = None
    image: Optional[str] = None


class MetadataOptions(BaseModel):
    include_organization: bool = False
    include_website: bool = False
    include_software_application: bool = False
    race_data: Optional[RaceEventData] = None
    article_data: Optional[ArticleData] = None


class ArticleMeta(BaseModel):
    published_time: str
    modified_time: Optional[str] = None
    author: Optional[str] = None
    section: Optional[str] = None
    tags: List[str] = Field(default_factory=list)


OgType = Literal["website", "article", "product"]


class OpenGraphTags(BaseModel):
    title: str
    description: str
    url: str
    type: OgType = "website"
    image: str
    image_alt: Optional[str] = None
    site_name: str
    locale: Optional[str] = None
    published_time: Optional[str] = None
    modified_time: Optional[str] = None
    author: Optional[str] = None
    section: Optional[str] = None
    tags: List[str] = Field(default_factory=list)


class TwitterTags(BaseModel):
    card: Literal["summary", "summary_large_image", "app", "player"] = "summary_large_image"
    site: Optional[str] = None
    creator: Optional[str] = None
    title: str
    description: str
    image: str
    image_alt: Optional[str] = None


class DiscoveryTags(BaseModel):
    """Title, description, canonical and social-preview fields for one page."""

    title: str
    description: str
    canonical: str
    robots: Optional[str] = None
    open_graph: OpenGraphTags
    twitter: TwitterTags


class MetaEntry(BaseModel):
    name: Optional[str] = None
    property: Optional[str] = None
    content: str


class LinkEntry(BaseModel):
    rel: str
    href: str


class HeadProps(BaseModel):
    """Tags pre-shaped for a head-management component."""

    title: str
    meta: List[MetaEntry]
    link: List[LinkEntry]


class TagElement(BaseModel):
    type: Literal["meta", "link", "script"]
    props: Dict[str, str]
    children: Optional[str] = None


class MetaValidationResult(BaseModel):
    is_valid: bool
    errors: List[str]
    warnings: List[str]

from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from app.models.page import PageCategory


class HubSection(BaseModel):
    """A named group of spokes shown on a hub page."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: Optional[str] = None
    page_ids: List[str] = Field(default_factory=list)


class HubConfig(BaseModel):
    """Category landing page that links out to its spokes."""

    model_config = ConfigDict(frozen=True)

    id: str
    slug: str
    path: str
    category: PageCategory

    title: str
    description: str
    h1: str
    intro: str

    spoke_page_ids: List[str] = Field(default_factory=list)
    categories: List[HubSection] = Field(default_factory=list)
    featured_page_ids: List[str] = Field(default_factory=list)


class HubRegistry(BaseModel):
    """Immutable ``PageCategory -> HubConfig`` mapping passed to linking and metadata code."""

    model_config = ConfigDict(frozen=True)

    hubs: Dict[PageCategory, HubConfig]

    def hub_for(self, category: PageCategory) -> Optional[HubConfig]:
        return self.hubs.get(category)

    def hub_paths(self) -> Tuple[str, ...]:
        return tuple(hub.path for hub in self.hubs.values())

    def is_hub_path(self, path: str) -> bool:
        return path in self.hub_paths()

    def all(self) -> List[HubConfig]:
        return list(self.hubs.values())

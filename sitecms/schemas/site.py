# sitecms/schemas/site.py
# Pydantic: requests/responses for sites, pages, blocks and the site singletons
from __future__ import annotations
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, field_validator

from sitecms.blocks.types import DocModel


def _not_null(value, field: str):
    if value is None:
        raise ValueError(f"{field} may be omitted but not null")
    return value


# ---------- Site ----------
class Theme(DocModel):
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    font_family: Optional[str] = None


class SiteCreate(DocModel):
    id: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=160)
    tagline: Optional[str] = Field(None, max_length=255)
    domain: Optional[str] = Field(None, max_length=255)
    theme: Optional[Theme] = None


class SiteUpdate(DocModel):
    name: Optional[str] = Field(None, min_length=1, max_length=160)
    tagline: Optional[str] = Field(None, max_length=255)
    domain: Optional[str] = Field(None, max_length=255)
    theme: Optional[Theme] = None

    # omitted means "leave as is"; an explicit null cannot clear a required column
    @field_validator("name")
    @classmethod
    def _name_not_null(cls, v):
        return _not_null(v, "name")


# ---------- Page ----------
class PageCreate(DocModel):
    id: Optional[str] = Field(None, max_length=100)  # generated from the title when omitted
    title: str = Field(..., min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = Field(None, max_length=512)
    blocks: List[Dict[str, Any]] = Field(default_factory=list)
    order: Optional[int] = None
    is_published: bool = True


class PageSave(DocModel):
    title: str = Field(..., max_length=255)
    blocks: List[Dict[str, Any]] = Field(default_factory=list)


class PageUpdate(DocModel):
    title: Optional[str] = Field(None, max_length=255)
    slug: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = Field(None, max_length=512)
    order: Optional[int] = None
    is_published: Optional[bool] = None

    @field_validator("title", "is_published")
    @classmethod
    def _required_not_null(cls, v, info):
        return _not_null(v, info.field_name)


# ---------- Blocks ----------
class BlocksReplace(DocModel):
    blocks: List[Dict[str, Any]]


class BlockInsert(DocModel):
    """Either a full `block` document or a `type` to start from its defaults."""
    block: Optional[Dict[str, Any]] = None
    type: Optional[str] = None
    position: Optional[int] = Field(None, ge=0)


class BlockReorder(DocModel):
    from_index: int = Field(..., ge=0)
    to_index: int = Field(..., ge=0)


# ---------- Navigation ----------
class NavItem(DocModel):
    id: str
    label: str
    url: str
    children: Optional[List["NavItem"]] = None


class Navigation(DocModel):
    items: List[NavItem] = Field(default_factory=list)


# ---------- Footer ----------
class FooterLink(DocModel):
    label: str
    url: str


class FooterColumn(DocModel):
    id: str
    title: str
    links: List[FooterLink] = Field(default_factory=list)


class SocialLink(DocModel):
    platform: Literal["facebook", "instagram", "twitter", "linkedin", "youtube"]
    url: str


class Footer(DocModel):
    logo: Optional[str] = None
    tagline: Optional[str] = None
    columns: Optional[List[FooterColumn]] = None
    copyright: Optional[str] = None
    social_links: Optional[List[SocialLink]] = None


# ---------- Page index ----------
class PageIndexEntry(DocModel):
    id: str
    title: str
    path: str
    order: int


class PageIndex(DocModel):
    pages: List[PageIndexEntry] = Field(default_factory=list)


NavItem.model_rebuild()

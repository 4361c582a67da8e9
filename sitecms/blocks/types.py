# sitecms/blocks/types.py
# Block documents: a tagged union on `type` plus the shared sub-entities.
from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel


class DocModel(BaseModel):
    """Documents are stored camelCase; attributes are snake_case."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


# ---------- Sub-entities ----------
class CTA(DocModel):
    id: str = ""
    text: str = ""
    url: str = ""
    variant: Optional[Literal["primary", "secondary", "outline"]] = None


class MediaImage(DocModel):
    id: str = ""
    src: str = ""
    alt: Optional[str] = None
    caption: Optional[str] = None


class Feature(DocModel):
    id: str = ""
    icon: Optional[str] = None
    title: str = ""
    description: str = ""


class Program(DocModel):
    id: str = ""
    name: str = ""
    description: str = ""
    image: Optional[str] = None
    age: Optional[str] = None
    schedule: Optional[str] = None
    cta: Optional[CTA] = None


class Session(DocModel):
    id: str = ""
    name: str = ""
    time: str = ""
    day: Optional[str] = None
    category: Optional[str] = None
    instructor: Optional[str] = None
    location: Optional[str] = None


class Testimonial(DocModel):
    id: str = ""
    quote: str = ""
    author: str = ""
    role: Optional[str] = None
    image: Optional[str] = None


class FormField(DocModel):
    id: str = ""
    type: Literal["text", "email", "phone", "textarea", "select"] = "text"
    label: str = ""
    required: Optional[bool] = None
    options: Optional[List[str]] = None


# ---------- Blocks ----------
class BaseBlock(DocModel):
    id: str
    type: str
    order: int = 0


class HeroBlock(BaseBlock):
    type: Literal["hero"] = "hero"
    title: str = ""
    subtitle: Optional[str] = None
    background_image: Optional[str] = None
    overlay_opacity: Optional[float] = None
    ctas: Optional[List[CTA]] = None
    alignment: Optional[Literal["left", "center", "right"]] = None


class ContentBlock(BaseBlock):
    type: Literal["content-block"] = "content-block"
    label: Optional[str] = None
    title: str = ""
    text: str = ""
    image: Optional[str] = None
    image_position: Optional[Literal["left", "right"]] = None
    cta: Optional[CTA] = None


class MediaRowBlock(BaseBlock):
    type: Literal["media-row"] = "media-row"
    images: List[MediaImage] = Field(default_factory=list)
    columns: Optional[Literal[2, 3, 4]] = None


class ImageDividerBlock(BaseBlock):
    type: Literal["image-divider"] = "image-divider"
    image: str = ""
    alt: Optional[str] = None
    height: Optional[Literal["small", "medium", "large"]] = None


class FeaturesBlock(BaseBlock):
    type: Literal["features"] = "features"
    title: Optional[str] = None
    subtitle: Optional[str] = None
    features: List[Feature] = Field(default_factory=list)
    columns: Optional[Literal[2, 3, 4]] = None


class ProgramsBlock(BaseBlock):
    type: Literal["programs"] = "programs"
    title: Optional[str] = None
    subtitle: Optional[str] = None
    programs: List[Program] = Field(default_factory=list)


class ScheduleBlock(BaseBlock):
    type: Literal["schedule"] = "schedule"
    title: Optional[str] = None
    filters: Optional[List[str]] = None
    sessions: List[Session] = Field(default_factory=list)


class CTABlock(BaseBlock):
    type: Literal["cta"] = "cta"
    title: str = ""
    description: Optional[str] = None
    buttons: List[CTA] = Field(default_factory=list)
    background_image: Optional[str] = None
    background_color: Optional[str] = None


class TextBlock(BaseBlock):
    type: Literal["text"] = "text"
    title: Optional[str] = None
    content: str = ""  # HTML


class GalleryBlock(BaseBlock):
    type: Literal["gallery"] = "gallery"
    title: Optional[str] = None
    images: List[MediaImage] = Field(default_factory=list)
    layout: Optional[Literal["grid", "masonry", "carousel"]] = None


class TestimonialsBlock(BaseBlock):
    type: Literal["testimonials"] = "testimonials"
    title: Optional[str] = None
    testimonials: List[Testimonial] = Field(default_factory=list)


class ContactFormBlock(BaseBlock):
    type: Literal["contact-form"] = "contact-form"
    title: Optional[str] = None
    subtitle: Optional[str] = None
    email: str = ""
    fields: Optional[List[FormField]] = None


class MapBlock(BaseBlock):
    type: Literal["map"] = "map"
    address: str = ""
    lat: Optional[float] = None
    lng: Optional[float] = None
    zoom: Optional[int] = None


class UnknownBlock(BaseBlock):
    """Any block whose `type` is not in the catalog; kept verbatim."""
    id: str = ""


Block = Annotated[
    Union[
        HeroBlock,
        ContentBlock,
        MediaRowBlock,
        ImageDividerBlock,
        FeaturesBlock,
        ProgramsBlock,
        ScheduleBlock,
        CTABlock,
        TextBlock,
        GalleryBlock,
        TestimonialsBlock,
        ContactFormBlock,
        MapBlock,
    ],
    Field(discriminator="type"),
]

BlockType = Literal[
    "hero",
    "content-block",
    "media-row",
    "image-divider",
    "features",
    "programs",
    "schedule",
    "cta",
    "text",
    "gallery",
    "testimonials",
    "contact-form",
    "map",
]

BLOCK_MODELS: Dict[str, type[BaseBlock]] = {
    "hero": HeroBlock,
    "content-block": ContentBlock,
    "media-row": MediaRowBlock,
    "image-divider": ImageDividerBlock,
    "features": FeaturesBlock,
    "programs": ProgramsBlock,
    "schedule": ScheduleBlock,
    "cta": CTABlock,
    "text": TextBlock,
    "gallery": GalleryBlock,
    "testimonials": TestimonialsBlock,
    "contact-form": ContactFormBlock,
    "map": MapBlock,
}

BLOCK_TYPES: tuple[str, ...] = tuple(BLOCK_MODELS)

BLOCK_TYPE_META: Dict[str, Dict[str, str]] = {
    "hero": {"label": "Hero Section", "icon": "Image", "description": "Full-width hero with title and CTAs"},
    "content-block": {"label": "Content Block", "icon": "LayoutList", "description": "Text and image side by side"},
    "media-row": {"label": "Media Row", "icon": "Images", "description": "Grid of images"},
    "image-divider": {"label": "Image Divider", "icon": "ImageIcon", "description": "Full-width image separator"},
    "features": {"label": "Features", "icon": "Star", "description": "Feature cards with icons"},
    "programs": {"label": "Programs", "icon": "GraduationCap", "description": "Program/service cards"},
    "schedule": {"label": "Schedule", "icon": "Calendar", "description": "Session schedule with filters"},
    "cta": {"label": "Call to Action", "icon": "MousePointer", "description": "CTA section with buttons"},
    "text": {"label": "Text Content", "icon": "Type", "description": "Rich text content area"},
    "gallery": {"label": "Gallery", "icon": "Grid", "description": "Image gallery"},
    "testimonials": {"label": "Testimonials", "icon": "Quote", "description": "Customer testimonials"},
    "contact-form": {"label": "Contact Form", "icon": "Mail", "description": "Contact form"},
    "map": {"label": "Map", "icon": "MapPin", "description": "Location map"},
}

_block_adapter: TypeAdapter = TypeAdapter(Block)


def is_known_block_type(block_type: Any) -> bool:
    return isinstance(block_type, str) and block_type in BLOCK_MODELS


def parse_block(data: Dict[str, Any]) -> BaseBlock:
    """
    Parses a block document into its variant model.
    Unknown types come back as UnknownBlock instead of failing; a known type
    with an invalid payload raises pydantic.ValidationError.
    """
    if not is_known_block_type(data.get("type")):
        return UnknownBlock.model_validate({**data, "type": str(data.get("type") or "")})
    return _block_adapter.validate_python(data)


def validate_block_document(data: Dict[str, Any]) -> Dict[str, Any]:
    """Round-trips a block document through its model (camelCase out)."""
    return parse_block(data).to_document()


__all__ = [
    "Block", "BlockType", "BaseBlock", "UnknownBlock", "BLOCK_MODELS", "BLOCK_TYPES",
    "BLOCK_TYPE_META", "CTA", "MediaImage", "Feature", "Program", "Session",
    "Testimonial", "FormField", "parse_block", "validate_block_document",
    "is_known_block_type",
]

#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Pydantic v2 models for Notion content blocks and rich-text spans.

Blocks follow the Notion wire shape: the type-specific payload lives under a
key named after the block type, e.g.::

    {"id": "…", "type": "paragraph", "has_children": false,
     "paragraph": {"rich_text": [...]}}

``Block`` is a closed tagged union over the supported block types.  Any type
tag outside that set validates as ``UnsupportedBlock`` instead of failing, and
every payload field carries a default so that absent (or null) sub-fields read
as empty values.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from typing import Annotated, Any, ClassVar, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    model_validator,
)
from typing_extensions import TypeAliasType


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Shared
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # Notion sends explicit nulls; treat them as absent so defaults apply.
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Rich text
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class Link(_Frozen):
    url: str = ""


class TextContent(_Frozen):
    content: str = ""
    link: Optional[Link] = None


class EquationContent(_Frozen):
    expression: str = ""


# -----------------------------------------------------------------------------

class PageMention(_Frozen):
    id: str = ""
    title: Optional[str] = None


class UserMention(_Frozen):
    id: str = ""
    name: Optional[str] = None


class DateMention(_Frozen):
    start: Optional[str] = None
    end: Optional[str] = None


class Mention(_Frozen):
    type: str = ""
    page: Optional[PageMention] = None
    user: Optional[UserMention] = None
    date: Optional[DateMention] = None


# -----------------------------------------------------------------------------

class Annotations(_Frozen):
    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    underline: bool = False
    code: bool = False
    color: str = "default"


# -----------------------------------------------------------------------------

class RichText(_Frozen):
    """One inline span: literal text, an equation or a mention."""

    type: str = "text"
    text: Optional[TextContent] = None
    equation: Optional[EquationContent] = None
    mention: Optional[Mention] = None
    annotations: Annotations = Field(default_factory=Annotations)
    plain_text: str = ""
    href: Optional[str] = None

    @property
    def link_url(self) -> str:
        """The span's link target: ``href`` first, then ``text.link.url``."""
        if self.href:
            return self.href
        if self.text and self.text.link and self.text.link.url:
            return self.text.link.url
        return ""


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Payloads
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TextPayload(_Frozen):
    rich_text: list[RichText] = Field(default_factory=list)
    color: str = "default"


class HeadingPayload(TextPayload):
    is_toggleable: bool = False


class ToDoPayload(TextPayload):
    checked: bool = False


class TitlePayload(_Frozen):
    title: str = ""


class EquationPayload(_Frozen):
    expression: str = ""


class ColumnListPayload(_Frozen):
    pass


class ColumnPayload(_Frozen):
    # Left untyped: the API has sent both numbers and numeric strings here.
    ratio: Any = None
    width_ratio: Any = None


class SyncedBlockPayload(_Frozen):
    synced_from: Optional[dict[str, Any]] = None


class LinkToPagePayload(_Frozen):
    type: str = ""
    page_id: str = ""
    database_id: str = ""
    url: str = ""


class CodePayload(_Frozen):
    rich_text: list[RichText] = Field(default_factory=list)
    caption: list[RichText] = Field(default_factory=list)
    language: str = "text"


class TablePayload(_Frozen):
    table_width: int = 0
    has_column_header: bool = False
    has_row_header: bool = False


class TableRowPayload(_Frozen):
    cells: list[list[RichText]] = Field(default_factory=list)


class FileRef(_Frozen):
    url: str = ""
    expiry_time: Optional[str] = None


class Icon(_Frozen):
    type: str = ""
    emoji: Optional[str] = None
    external: Optional[FileRef] = None
    file: Optional[FileRef] = None


class CalloutPayload(TextPayload):
    icon: Optional[Icon] = None


class BookmarkPayload(_Frozen):
    url: str = ""
    caption: list[RichText] = Field(default_factory=list)


class MediaPayload(_Frozen):
    """Shared payload of image / file / pdf / video blocks."""

    type: str = ""
    external: Optional[FileRef] = None
    file: Optional[FileRef] = None
    caption: list[RichText] = Field(default_factory=list)
    name: str = ""

    @property
    def source_url(self) -> str:
        if self.external and self.external.url:
            return self.external.url
        if self.file and self.file.url:
            return self.file.url
        return ""


class EmbedPayload(_Frozen):
    url: str = ""
    caption: list[RichText] = Field(default_factory=list)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Blocks
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class BaseBlock(_Frozen):
    id: str = ""
    type: str
    has_children: bool = False
    children: Optional[list[Block]] = None

    @property
    def anchor(self) -> str:
        """Block id with separators stripped, usable as an in-page anchor."""
        return self.id.replace("-", "")


# -----------------------------------------------------------------------------

class ParagraphBlock(BaseBlock):
    type: Literal["paragraph"] = "paragraph"
    paragraph: TextPayload = Field(default_factory=TextPayload)


class Heading1Block(BaseBlock):
    level: ClassVar[int] = 1
    type: Literal["heading_1"] = "heading_1"
    heading_1: HeadingPayload = Field(default_factory=HeadingPayload)

    @property
    def heading(self) -> HeadingPayload:
        return self.heading_1


class Heading2Block(BaseBlock):
    level: ClassVar[int] = 2
    type: Literal["heading_2"] = "heading_2"
    heading_2: HeadingPayload = Field(default_factory=HeadingPayload)

    @property
    def heading(self) -> HeadingPayload:
        return self.heading_2


class Heading3Block(BaseBlock):
    level: ClassVar[int] = 3
    type: Literal["heading_3"] = "heading_3"
    heading_3: HeadingPayload = Field(default_factory=HeadingPayload)

    @property
    def heading(self) -> HeadingPayload:
        return self.heading_3


class BulletedListItemBlock(BaseBlock):
    type: Literal["bulleted_list_item"] = "bulleted_list_item"
    bulleted_list_item: TextPayload = Field(default_factory=TextPayload)


class NumberedListItemBlock(BaseBlock):
    type: Literal["numbered_list_item"] = "numbered_list_item"
    numbered_list_item: TextPayload = Field(default_factory=TextPayload)


class ToDoBlock(BaseBlock):
    type: Literal["to_do"] = "to_do"
    to_do: ToDoPayload = Field(default_factory=ToDoPayload)


class ToggleBlock(BaseBlock):
    type: Literal["toggle"] = "toggle"
    toggle: TextPayload = Field(default_factory=TextPayload)


class ChildPageBlock(BaseBlock):
    type: Literal["child_page"] = "child_page"
    child_page: TitlePayload = Field(default_factory=TitlePayload)


class ChildDatabaseBlock(BaseBlock):
    type: Literal["child_database"] = "child_database"
    child_database: TitlePayload = Field(default_factory=TitlePayload)


class QuoteBlock(BaseBlock):
    type: Literal["quote"] = "quote"
    quote: TextPayload = Field(default_factory=TextPayload)


class DividerBlock(BaseBlock):
    type: Literal["divider"] = "divider"


class EquationBlock(BaseBlock):
    type: Literal["equation"] = "equation"
    equation: EquationPayload = Field(default_factory=EquationPayload)


class ColumnListBlock(BaseBlock):
    type: Literal["column_list"] = "column_list"
    column_list: ColumnListPayload = Field(default_factory=ColumnListPayload)


class ColumnBlock(BaseBlock):
    type: Literal["column"] = "column"
    column: ColumnPayload = Field(default_factory=ColumnPayload)


class SyncedBlock(BaseBlock):
    type: Literal["synced_block"] = "synced_block"
    synced_block: SyncedBlockPayload = Field(default_factory=SyncedBlockPayload)


class LinkToPageBlock(BaseBlock):
    type: Literal["link_to_page"] = "link_to_page"
    link_to_page: LinkToPagePayload = Field(default_factory=LinkToPagePayload)


class CodeBlock(BaseBlock):
    type: Literal["code"] = "code"
    code: CodePayload = Field(default_factory=CodePayload)


class TableBlock(BaseBlock):
    type: Literal["table"] = "table"
    table: TablePayload = Field(default_factory=TablePayload)


class TableRowBlock(BaseBlock):
    type: Literal["table_row"] = "table_row"
    table_row: TableRowPayload = Field(default_factory=TableRowPayload)


class CalloutBlock(BaseBlock):
    type: Literal["callout"] = "callout"
    callout: CalloutPayload = Field(default_factory=CalloutPayload)


class BookmarkBlock(BaseBlock):
    type: Literal["bookmark"] = "bookmark"
    bookmark: BookmarkPayload = Field(default_factory=BookmarkPayload)


class ImageBlock(BaseBlock):
    type: Literal["image"] = "image"
    image: MediaPayload = Field(default_factory=MediaPayload)


class FileBlock(BaseBlock):
    type: Literal["file"] = "file"
    file: MediaPayload = Field(default_factory=MediaPayload)


class PdfBlock(BaseBlock):
    type: Literal["pdf"] = "pdf"
    pdf: MediaPayload = Field(default_factory=MediaPayload)


class VideoBlock(BaseBlock):
    type: Literal["video"] = "video"
    video: MediaPayload = Field(default_factory=MediaPayload)


class EmbedBlock(BaseBlock):
    type: Literal["embed"] = "embed"
    embed: EmbedPayload = Field(default_factory=EmbedPayload)


class UnsupportedBlock(BaseBlock):
    """Any block whose type tag is not one of the variants above."""

    type: str = "unsupported"


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Tagged union
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

BLOCK_MODELS: tuple[type[BaseBlock], ...] = (
    ParagraphBlock,
    Heading1Block,
    Heading2Block,
    Heading3Block,
    BulletedListItemBlock,
    NumberedListItemBlock,
    ToDoBlock,
    ToggleBlock,
    ChildPageBlock,
    ChildDatabaseBlock,
    QuoteBlock,
    DividerBlock,
    EquationBlock,
    ColumnListBlock,
    ColumnBlock,
    SyncedBlock,
    LinkToPageBlock,
    CodeBlock,
    TableBlock,
    TableRowBlock,
    CalloutBlock,
    BookmarkBlock,
    ImageBlock,
    FileBlock,
    PdfBlock,
    VideoBlock,
    EmbedBlock,
)

_UNSUPPORTED_TAG = "unsupported"


def _block_tag(value: Any) -> str:
    if isinstance(value, dict):
        tag = value.get("type")
    else:
        tag = getattr(value, "type", None)
    if isinstance(value, UnsupportedBlock) or tag not in BLOCK_TYPES:
        return _UNSUPPORTED_TAG
    return tag


Block = TypeAliasType("Block", Annotated[
    Union[
        Annotated[ParagraphBlock, Tag("paragraph")],
        Annotated[Heading1Block, Tag("heading_1")],
        Annotated[Heading2Block, Tag("heading_2")],
        Annotated[Heading3Block, Tag("heading_3")],
        Annotated[BulletedListItemBlock, Tag("bulleted_list_item")],
        Annotated[NumberedListItemBlock, Tag("numbered_list_item")],
        Annotated[ToDoBlock, Tag("to_do")],
        Annotated[ToggleBlock, Tag("toggle")],
        Annotated[ChildPageBlock, Tag("child_page")],
        Annotated[ChildDatabaseBlock, Tag("child_database")],
        Annotated[QuoteBlock, Tag("quote")],
        Annotated[DividerBlock, Tag("divider")],
        Annotated[EquationBlock, Tag("equation")],
        Annotated[ColumnListBlock, Tag("column_list")],
        Annotated[ColumnBlock, Tag("column")],
        Annotated[SyncedBlock, Tag("synced_block")],
        Annotated[LinkToPageBlock, Tag("link_to_page")],
        Annotated[CodeBlock, Tag("code")],
        Annotated[TableBlock, Tag("table")],
        Annotated[TableRowBlock, Tag("table_row")],
        Annotated[CalloutBlock, Tag("callout")],
        Annotated[BookmarkBlock, Tag("bookmark")],
        Annotated[ImageBlock, Tag("image")],
        Annotated[FileBlock, Tag("file")],
        Annotated[PdfBlock, Tag("pdf")],
        Annotated[VideoBlock, Tag("video")],
        Annotated[EmbedBlock, Tag("embed")],
        Annotated[UnsupportedBlock, Tag(_UNSUPPORTED_TAG)],
    ],
    Discriminator(_block_tag),
])

for _model in (BaseBlock, *BLOCK_MODELS, UnsupportedBlock):
    _model.model_rebuild()

BLOCK_TYPES: frozenset[str] = frozenset(m.model_fields["type"].default for m in BLOCK_MODELS)

_BLOCK_LIST = TypeAdapter(list[Block])


# -----------------------------------------------------------------------------

def parse_blocks(data: Any) -> list[BaseBlock]:
    """Validate raw Notion JSON into block models.

    Accepts a list of block objects or a Notion list envelope
    (``{"object": "list", "results": [...]}``).
    """
    if isinstance(data, dict):
        data = data.get("results") or []
    return _BLOCK_LIST.validate_python(data)


# -----------------------------------------------------------------------------

from blockpress.schemas.blocks import (
    Annotations, RichText, TextContent, Link, EquationContent, Mention,
    BaseBlock, Block, UnsupportedBlock,
    BLOCK_MODELS, BLOCK_TYPES,
    parse_blocks,
)
from blockpress.schemas.schemas import (
    OKResponse,
    FetchRequest, EntityReference,
    RenderRequest, RenderResponse,
    ResolvedResource, PendingResponse,
    HealthResponse,
)

__all__ = [
    "Annotations", "RichText", "TextContent", "Link", "EquationContent", "Mention",
    "BaseBlock", "Block", "UnsupportedBlock",
    "BLOCK_MODELS", "BLOCK_TYPES",
    "parse_blocks",
    "OKResponse",
    "FetchRequest", "EntityReference",
    "RenderRequest", "RenderResponse",
    "ResolvedResource", "PendingResponse",
    "HealthResponse",
]

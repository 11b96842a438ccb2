"""Block registry API router."""

from typing import Any

from fastapi import APIRouter, HTTPException, Query, status

from fastpress.schemas.page import BlockSummary, BlockValidationRequest, BlockValidationResponse
from fastpress.services.blocks import (
    create_default_block,
    get_all_block_configs,
    get_available_blocks,
    get_block_config,
    get_blocks_by_category,
    validate_block,
)

router = APIRouter(prefix="/blocks", tags=["Blocks"])


@router.get("")
async def list_block_configs(
    category: str | None = Query(None, description="content, layout, media or data"),
) -> list[dict[str, Any]]:
    """Full block declarations, optionally for one category."""
    configs = get_blocks_by_category(category) if category else get_all_block_configs()
    return [config.to_dict() for config in configs]


@router.get("/available", response_model=list[BlockSummary])
async def list_available_blocks() -> list[dict[str, str]]:
    """Block summaries for a block picker."""
    return get_available_blocks()


@router.get("/{block_type}")
async def get_block(block_type: str) -> dict[str, Any]:
    """One block declaration."""
    config = get_block_config(block_type)
    if config is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Block type '{block_type}' not found",
        )
    return config.to_dict()


@router.post("/{block_type}/default")
async def new_block(block_type: str) -> dict[str, Any]:
    """A new block of this type filled with its defaults."""
    block = create_default_block(block_type)
    if block is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Block type '{block_type}' not found",
        )
    return block


@router.post("/validate", response_model=BlockValidationResponse)
async def validate(data: BlockValidationRequest) -> BlockValidationResponse:
    """Validate a single block."""
    result = validate_block(data.block)
    return BlockValidationResponse(is_valid=result.is_valid, errors=result.errors)

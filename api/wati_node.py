"""
Wati Action Node Endpoint

Runs a Wati operation over a batch of workflow items.
I/O only: parameter handling and API calls live in transport.wati.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from transport.wati.client import WatiClient, WatiClientError
from transport.wati.credentials import CredentialsError, WatiCredentials
from transport.wati.node import WatiNode, WatiOperationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/nodes/wati", tags=["Wati Node"])


class NodeExecutionRequest(BaseModel):
    """Items to process; each item carries the operation parameters."""
    items: list[dict[str, Any]] = Field(default_factory=lambda: [{}])
    continue_on_fail: bool = Field(False, alias="continueOnFail")

    model_config = {"populate_by_name": True}


class NodeExecutionResponse(BaseModel):
    items: list[dict[str, Any]]


def get_wati_node() -> WatiNode:
    """Build the node from configured credentials."""
    try:
        credentials = WatiCredentials.from_config()
    except CredentialsError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )
    return WatiNode(WatiClient(credentials))


@router.post("/{resource}/{operation}", response_model=NodeExecutionResponse)
async def execute_wati_operation(
    resource: str,
    operation: str,
    body: NodeExecutionRequest,
    node: WatiNode = Depends(get_wati_node),
) -> NodeExecutionResponse:
    """
    Execute ``resource``/``operation`` once per item.

    Raises:
        HTTPException(400): Unknown operation or invalid item parameters
        HTTPException(502): Wati API call failed
    """

    try:
        items = await node.execute(
            body.items,
            resource,
            operation,
            continue_on_fail=body.continue_on_fail,
        )
    except WatiOperationError as e:
        if isinstance(e.__cause__, WatiClientError):
            logger.error(
                f"Wati API call failed: {e}",
                extra={"resource": resource, "operation": operation, "item_index": e.item_index},
            )
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"Wati API call failed: {e}",
            )
        logger.warning(
            f"Wati operation rejected: {e}",
            extra={"resource": resource, "operation": operation, "item_index": e.item_index},
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    return NodeExecutionResponse(items=items)


@router.get("/credentials/test")
async def test_wati_credentials(node: WatiNode = Depends(get_wati_node)) -> dict[str, str]:
    """Check the configured token against the Wati API."""
    try:
        await node.client.test_credentials()
    except WatiClientError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Credential test failed: {e}",
        )
    return {"status": "ok"}

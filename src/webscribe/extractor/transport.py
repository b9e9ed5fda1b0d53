"""
Cross-frame transport contract and the in-process frame channel.

Request ``{"command": "extract"}``; response
``{"success": bool, "nodes"?: [...], "metadata"?: {...}, "error"?: str}``.
A frame that does not answer is treated exactly like an explicit failure.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Literal, Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .models import ExtractionResult, metadata_from_dict, metadata_to_dict, node_from_dict, node_to_dict
from .orchestrator import DocumentContext, ExtractionOrchestrator

logger = structlog.get_logger(__name__)


class ExtractRequest(BaseModel):
    command: Literal["extract"] = "extract"


class ExtractResponse(BaseModel):
    success: bool
    nodes: Optional[List[Dict[str, Any]]] = None
    metadata: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    frame_id: int = Field(default=0, alias="frameId")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_result(cls, result: ExtractionResult) -> ExtractResponse:
        return cls(
            success=True,
            nodes=[node_to_dict(node) for node in result.nodes],
            metadata=metadata_to_dict(result.metadata),
            frame_id=result.origin_frame_id,
        )

    @classmethod
    def failure(cls, error: str, frame_id: int = 0) -> ExtractResponse:
        return cls(success=False, error=error, frame_id=frame_id)

    def to_result(self) -> Optional[ExtractionResult]:
        """Decode a successful response; failures and malformed payloads decode to None.

        Metadata is optional on the wire; a response without it keeps its
        nodes under default metadata.
        """
        if not self.success:
            return None
        try:
            nodes = tuple(node_from_dict(node) for node in self.nodes or ())
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Discarding malformed frame response", frame_id=self.frame_id, error=str(e))
            return None
        return ExtractionResult(
            metadata=metadata_from_dict(self.metadata or {}),
            nodes=nodes,
            origin_frame_id=self.frame_id,
        )


def decode_response(raw: Optional[Dict[str, Any]], frame_id: int) -> Optional[ExtractionResult]:
    """Turn a raw frame response into a candidate result, or None."""
    if raw is None:
        return None
    try:
        response = ExtractResponse.model_validate({**raw, "frameId": frame_id})
    except ValidationError as e:
        logger.warning("Invalid frame response", frame_id=frame_id, error=str(e))
        return None
    if not response.success:
        logger.info("Frame reported failure", frame_id=frame_id, error=response.error)
        return None
    return response.to_result()


class LocalFrameChannel:
    """Serves extraction requests for one in-memory document.

    Extraction is synchronous DOM work, so it runs in a worker thread; the
    document is parsed lazily on the first request and reused afterwards.
    """

    def __init__(
        self,
        frame_id: int,
        html: str,
        url: str = "",
        orchestrator: Optional[ExtractionOrchestrator] = None,
    ) -> None:
        self.frame_id = frame_id
        self.html = html
        self.url = url
        self.orchestrator = orchestrator or ExtractionOrchestrator()
        self._context: Optional[DocumentContext] = None

    def _extract_sync(self) -> ExtractionResult:
        if self._context is None:
            self._context = DocumentContext.from_html(
                self.html, url=self.url, frame_id=self.frame_id, parser=self.orchestrator.settings.parser
            )
        return self.orchestrator.extract(self._context)

    async def request(self, message: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        try:
            request = ExtractRequest.model_validate(message)
        except ValidationError:
            return ExtractResponse.failure(f"Unsupported command: {message.get('command')!r}", self.frame_id).model_dump(
                by_alias=True
            )

        logger.debug("Frame request", frame_id=self.frame_id, command=request.command)
        try:
            result = await asyncio.to_thread(self._extract_sync)
        except Exception as e:
            logger.error("Frame extraction failed", frame_id=self.frame_id, error=str(e), error_type=type(e).__name__)
            return ExtractResponse.failure(str(e), self.frame_id).model_dump(by_alias=True)
        return ExtractResponse.from_result(result).model_dump(by_alias=True)

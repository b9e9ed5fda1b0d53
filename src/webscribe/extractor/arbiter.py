"""
Cross-context arbitration.

Every frame of a page is extracted independently; ``select_result`` is a
pure reduction over the terminal per-frame results, and ``FrameArbiter``
is the fan-out/fan-in around it.
"""

from __future__ import annotations

import asyncio
from typing import Iterable, List, Optional, Sequence

import structlog
from structlog.contextvars import bound_contextvars

from webscribe.config.config import ArbiterSettings
from webscribe.exceptions import EmptyContentError, NoActiveContextError

from .models import ExtractionResult
from .protocols import FrameChannel
from .transport import ExtractRequest, decode_response

logger = structlog.get_logger(__name__)

MAIN_FRAME_ID = 0


def select_result(
    candidates: Iterable[Optional[ExtractionResult]],
    main_preference_ratio: float = 0.4,
) -> Optional[ExtractionResult]:
    """Pick the single best result among per-frame candidates.

    Candidates without nodes are ignored. With several candidates the
    richest wins, unless the main frame has at least
    ``main_preference_ratio`` of its node count.
    """
    valid = [candidate for candidate in candidates if candidate is not None and not candidate.is_empty]
    if not valid:
        return None
    if len(valid) == 1:
        return valid[0]

    # sorted() is stable: equal node counts keep arrival order
    ranked = sorted(valid, key=lambda result: result.node_count, reverse=True)
    best = ranked[0]
    main = next((result for result in ranked if result.origin_frame_id == MAIN_FRAME_ID), None)
    if main is not None and main.node_count >= main_preference_ratio * best.node_count:
        return main
    return best


class FrameArbiter:
    """Runs extraction in every frame concurrently and keeps the best result."""

    def __init__(self, settings: Optional[ArbiterSettings] = None) -> None:
        self.settings = settings or ArbiterSettings()
        self.logger = logger.bind(component="FrameArbiter")

    async def _ask(self, channel: FrameChannel) -> tuple[bool, Optional[ExtractionResult]]:
        """Return (answered, candidate) for one frame."""
        with bound_contextvars(frame_id=channel.frame_id):
            try:
                raw = await asyncio.wait_for(
                    channel.request(ExtractRequest().model_dump()),
                    timeout=self.settings.frame_timeout,
                )
            except asyncio.TimeoutError:
                self.logger.warning("Frame did not answer in time", frame_id=channel.frame_id)
                return False, None
            except Exception as e:
                self.logger.warning(
                    "Frame request failed", frame_id=channel.frame_id, error=str(e), error_type=type(e).__name__
                )
                return False, None
        if raw is None:
            return False, None
        return True, decode_response(raw, channel.frame_id)

    async def collect(self, channels: Sequence[FrameChannel]) -> List[Optional[ExtractionResult]]:
        """Ask every frame once, in parallel; missing answers become None."""
        answers = await asyncio.gather(*(self._ask(channel) for channel in channels))
        return [candidate for _, candidate in answers]

    async def arbitrate(self, channels: Sequence[FrameChannel]) -> ExtractionResult:
        """Extract from all frames and select one result.

        Raises:
            NoActiveContextError: If no frame answered at all
            EmptyContentError: If frames answered but none found content
        """
        if not channels:
            raise NoActiveContextError()

        answers = await asyncio.gather(*(self._ask(channel) for channel in channels))
        answered = any(ok for ok, _ in answers)
        candidates = [candidate for _, candidate in answers]
        self.logger.info(
            "Frame results collected",
            frames=len(channels),
            answered=sum(1 for ok, _ in answers if ok),
            node_counts={c.origin_frame_id: c.node_count for c in candidates if c is not None},
        )

        chosen = select_result(candidates, self.settings.main_preference_ratio)
        if chosen is not None:
            self.logger.info("Frame selected", frame_id=chosen.origin_frame_id, node_count=chosen.node_count)
            return chosen

        # Nothing usable: give the main frame one more chance after a delay
        main = next((channel for channel in channels if channel.frame_id == MAIN_FRAME_ID), channels[0])
        self.logger.info("No frame produced content, retrying main frame", delay=self.settings.retry_delay)
        await asyncio.sleep(self.settings.retry_delay)
        retry_answered, retry = await self._ask(main)
        if retry is not None and not retry.is_empty:
            return retry

        if answered or retry_answered:
            raise EmptyContentError()
        raise NoActiveContextError()

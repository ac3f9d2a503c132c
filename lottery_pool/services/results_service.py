"""Results service: wires the cache, the provider client and the draw processor."""

from lottery_pool.cache.durable import DatabaseTier
from lottery_pool.cache.ephemeral import MemoryTier
from lottery_pool.cache.orchestrator import ResultOrchestrator
from lottery_pool.cache.tiered import TieredCache
from lottery_pool.db.engine import async_session_factory
from lottery_pool.provider.client import DrawResultClient
from lottery_pool.scoring.processor import DrawProcessor, ProcessedDraw

result_cache = TieredCache(
    ephemeral=MemoryTier(),
    durable=DatabaseTier(async_session_factory),
)
provider_client = DrawResultClient()
orchestrator = ResultOrchestrator(result_cache, provider_client)
draw_processor = DrawProcessor(async_session_factory)


async def process_draw(
    orchestrator: ResultOrchestrator,
    processor: DrawProcessor,
    competition_id: int,
    lottery_type: str,
    draw_number: int,
) -> ProcessedDraw:
    """Resolve a draw through the cache/provider and fold it into a competition."""
    draw = await orchestrator.get_or_fetch(lottery_type, draw_number)
    return await processor.process_draw_for_competition(competition_id, draw)

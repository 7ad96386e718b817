"""
Factory for creating the song selection module.
"""
import logging
import random
from pathlib import Path
from typing import Optional

from shuffle_service.selection import (
    CandidateStore,
    InMemoryCandidateStore,
    PostgrestCandidateStore,
    RandomSource,
    SelectionOrchestrator,
    ToleranceSettings,
)

from .routes import create_song_selection_routes
from .services import SessionRegistry, SongSelectionService

logger = logging.getLogger(__name__)


def build_store(store_config, base_dir: Path) -> CandidateStore:
    """Create the candidate store named by the configuration.

    Args:
        store_config: StoreConfig with backend and connection settings
        base_dir: Directory that a relative catalog path is resolved against

    Returns:
        A CandidateStore implementation
    """
    if store_config.backend == "postgrest":
        if not store_config.postgrest_url:
            raise ValueError("STORE_BACKEND=postgrest requires POSTGREST_URL")
        logger.info(f"Using PostgREST song store at {store_config.postgrest_url}")
        return PostgrestCandidateStore(
            base_url=store_config.postgrest_url,
            api_key=store_config.postgrest_api_key or None,
            table=store_config.table,
            timeout=store_config.timeout,
        )

    if store_config.backend != "json":
        raise ValueError(f"Unknown store backend: {store_config.backend}")

    catalog_path = Path(store_config.catalog_path)
    if not catalog_path.is_absolute():
        catalog_path = base_dir / catalog_path
    return InMemoryCandidateStore.from_json_file(catalog_path)


def create_song_selection_module(
    store: CandidateStore,
    selection_config=None,
    rng: Optional[RandomSource] = None,
    session_config=None,
) -> dict:
    """Create song selection module with services and routes.

    Args:
        store: Candidate store shared by every session
        selection_config: SelectionConfig with tolerance tuning and optional seed
        rng: Random source shared by every session (tests); when omitted each
            session gets its own, seeded from the configuration if a seed is set
        session_config: SessionConfig with idle timeout and session cap

    Returns:
        Dictionary containing the registry, service and blueprint
    """
    settings = ToleranceSettings()
    seed = None
    if selection_config is not None:
        settings = ToleranceSettings(
            base_tolerance=selection_config.base_tolerance,
            max_tolerance=selection_config.max_tolerance,
            extreme_exempt_until=selection_config.extreme_exempt_until,
        )
        seed = selection_config.random_seed

    def make_orchestrator() -> SelectionOrchestrator:
        session_rng = rng
        if session_rng is None and seed is not None:
            session_rng = random.Random(seed)
        return SelectionOrchestrator(store, settings=settings, rng=session_rng)

    if session_config is not None:
        registry = SessionRegistry(
            make_orchestrator,
            idle_timeout=session_config.idle_timeout_minutes * 60,
            max_sessions=session_config.max_sessions,
        )
    else:
        registry = SessionRegistry(make_orchestrator)
    selection_service = SongSelectionService(registry)
    blueprint = create_song_selection_routes(selection_service)

    return {
        "registry": registry,
        "service": selection_service,
        "blueprint": blueprint,
        "settings": settings,
    }

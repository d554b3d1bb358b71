"""
kinsync API: FastAPI endpoints.

Exposes the engine to a host or a template consumer:
- Token reads (template surface)
- Snapshot and correspondence inspection
- Reconciliation trigger
- Lifecycle events
- Household ingestion
- Debug commands (when enabled)
"""

from typing import Literal, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from kinsync.household.store import HouseholdStore
from kinsync.lifecycle.controller import LifecycleController
from kinsync.models.config import ConversionConfig
from kinsync.models.records import DerivedRecord, SourceRecord
from kinsync.models.snapshot import DerivedAttributeSnapshot
from kinsync.reconciler.cache import ReconciliationCache
from kinsync.relationships.store import RelationshipStore
from kinsync.tokens.provider import TokenProvider


# --- Request/Response Models ---

class RefreshRequest(BaseModel):
    tick: Optional[int] = None


class RefreshResponse(BaseModel):
    tick: int
    changed: bool
    total_count: int


class SourceCreateRequest(BaseModel):
    name: str
    age: int = 0
    gender_class: Literal[0, 1] = 0
    guardian_id: Optional[str] = None


# --- Application Factory ---

def create_app(
    household: Optional[HouseholdStore] = None,
    relationship_store: Optional[RelationshipStore] = None,
    config: Optional[ConversionConfig] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="kinsync API",
        description="Source/derived record reconciliation engine",
        version="0.1.0",
    )

    # Initialize components
    hs = household or HouseholdStore()
    rs = relationship_store or RelationshipStore()
    cfg = config or ConversionConfig()
    cache = ReconciliationCache(household=hs, relationship_store=rs, config=cfg)
    lifecycle = LifecycleController(cache)
    tokens = TokenProvider(cache, tick_source=lambda: hs.tick, config=cfg)

    # Store components on app state for access in endpoints
    app.state.household = hs
    app.state.relationship_store = rs
    app.state.cache = cache
    app.state.lifecycle = lifecycle
    app.state.tokens = tokens

    def require_modding_commands() -> None:
        if not cfg.modding_commands:
            raise HTTPException(403, "Modding commands are disabled")

    # === TOKENS ===

    @app.get("/tokens")
    def read_tokens():
        """Every token's current value (None when not ready)."""
        return tokens.read_all()

    @app.get("/tokens/{name}")
    def read_token(name: str):
        token = tokens.get(name)
        if token is None:
            raise HTTPException(404, "Token not found")
        token.update_context()
        return token.to_dict()

    # === SNAPSHOT ===

    @app.get("/snapshot")
    def get_snapshot():
        snapshot = cache.snapshot()
        return {
            "total_count": cache.get_total_count(),
            "records": (
                [s.model_dump(mode="json") for s in snapshot]
                if snapshot is not None else None
            ),
        }

    @app.get("/snapshot/{index}/{field}")
    def get_snapshot_attribute(index: int, field: str):
        if field not in DerivedAttributeSnapshot.model_fields:
            raise HTTPException(404, "Attribute not found")
        return {
            "index": index,
            "ready": cache.is_ready(index),
            "value": cache.get_attribute(index, field),
        }

    @app.get("/correspondences")
    def list_correspondences():
        return [e.model_dump(mode="json") for e in cache.correspondences()]

    # === RECONCILER ===

    @app.post("/reconciler/refresh")
    def refresh(req: RefreshRequest):
        """Force a refresh for a tick (defaults to the household's)."""
        tick = req.tick if req.tick is not None else hs.tick
        changed = cache.refresh_if_stale(tick)
        return RefreshResponse(
            tick=tick,
            changed=changed,
            total_count=cache.get_total_count(),
        )

    # === LIFECYCLE ===

    @app.post("/lifecycle/teardown")
    def teardown():
        persisted = lifecycle.on_session_teardown()
        return {"status": "torn_down", "persisted": persisted}

    @app.post("/lifecycle/reset")
    def reset():
        lifecycle.on_session_reset()
        return {"status": "reset"}

    @app.post("/lifecycle/day-start")
    def day_start():
        relocated = lifecycle.on_daily_boundary()
        return {"status": "day_started", "relocated": relocated}

    # === HOUSEHOLD ===

    @app.get("/household/state")
    def get_household_state():
        return hs.get_state_snapshot()

    @app.post("/household/derived")
    def materialize_derived(record: DerivedRecord):
        """A stand-in appeared at home."""
        hs.materialize_derived(record)
        return {"status": "materialized", "record_id": record.record_id}

    @app.post("/household/tick")
    def advance_tick():
        return {"tick": hs.advance_tick()}

    @app.post("/household/day")
    def advance_day():
        hs.advance_day()
        return {"today": hs.today.model_dump() if hs.today else None}

    # === DEBUG COMMANDS ===

    @app.post("/debug/sources")
    def add_source(req: SourceCreateRequest):
        """Add a new household member."""
        require_modding_commands()
        record = SourceRecord(
            name=req.name,
            age=req.age,
            birth_order=max(
                (r.birth_order for r in cache.all_source_records()), default=-1
            ) + 1,
            gender_class=req.gender_class,
            guardian_id=req.guardian_id,
        )
        hs.add_source(record)
        return record.model_dump(mode="json")

    @app.delete("/debug/sources/{name}")
    def remove_source(name: str):
        require_modding_commands()
        if not hs.remove_source(name):
            raise HTTPException(404, "Source record not found")
        return {"status": "removed", "name": name}

    @app.post("/debug/sources/{name}/age")
    def age_source(name: str):
        """Age a household member up to the conversion threshold."""
        require_modding_commands()
        record = hs.age_to_threshold(name, cfg.age_threshold)
        if record is None:
            raise HTTPException(404, "Source record not found")
        return {"name": name, "age": record.age}

    return app


# Default application instance
app = create_app()

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from po_review.config import AppConfig
from po_review.builder import DashboardBuilder
from po_review.core.classification import classify
from po_review.core.prompt_rule import PromptRule, PromptRuleText
from po_review.core.view_state import has_card
from po_review.core.workflow_state import ClassifiedOrder
from po_review.logging_config import configure_logging
from po_review.presentation import DashboardView, PromptRulesView, render_dashboard, render_rules
from po_review.services.record_store.base import RecordStore
from po_review.services.record_store.sql import SqlRecordStore
from po_review.sessions import DashboardSession, RulesSession

logger = logging.getLogger("po_review.api")


def _configure_tracing(config: AppConfig) -> None:
    # opik reads its settings from the environment
    os.environ.setdefault("OPIK_PROJECT_NAME", config.opik_project)
    if config.opik_workspace:
        os.environ.setdefault("OPIK_WORKSPACE", config.opik_workspace)
    if config.opik_api_key:
        os.environ.setdefault("OPIK_API_KEY", config.opik_api_key)


def _prepare_sql_store(store: SqlRecordStore) -> None:
    database = store.engine.url.database
    if store.engine.url.get_backend_name() == "sqlite" and database and database != ":memory:":
        Path(database).parent.mkdir(parents=True, exist_ok=True)
    store.create_tables()
    logger.info(f"Database tables ready ({store.engine.url.render_as_string(hide_password=True)})")


def _error_view(view: DashboardView | PromptRulesView) -> JSONResponse:
    return JSONResponse(status_code=502, content=view.model_dump(mode="json"))


def create_app(config: AppConfig | None = None, store: RecordStore | None = None) -> FastAPI:
    """Factory function for creating the FastAPI app with config."""
    if config is None:
        config = AppConfig.load()

    configure_logging(config.log_level)
    _configure_tracing(config)

    builder = DashboardBuilder(config, store=store)
    record_store = builder.store
    tz = builder.tz
    dashboard = DashboardSession(builder.build())
    rules = RulesSession(record_store)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if isinstance(record_store, SqlRecordStore):
            _prepare_sql_store(record_store)
        yield
        logger.info("Shutting down")

    app = FastAPI(title="PO Review Dashboard", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    # ── Dashboard ────────────────────────────────────────────────────────

    @app.get("/api/dashboard", response_model=DashboardView)
    async def get_dashboard():
        """Refetch today's orders and render metrics plus the ordered cards."""
        state = await dashboard.refresh()
        view = render_dashboard(state, tz, datetime.now(timezone.utc))
        if view.error:
            return _error_view(view)
        return view

    @app.post("/api/dashboard/cards/{pdf_name}/toggle", response_model=DashboardView)
    async def toggle_card(pdf_name: str):
        """Expand or collapse a card without refetching."""
        if not has_card(dashboard.state, pdf_name):
            raise HTTPException(status_code=404, detail="Purchase order card not found")
        state = dashboard.toggle(pdf_name)
        return render_dashboard(state, tz, datetime.now(timezone.utc))

    # ── Purchase orders ──────────────────────────────────────────────────

    @app.get("/api/purchase-orders/errors", response_model=list[ClassifiedOrder])
    def list_error_orders():
        result = record_store.fetch_error_purchase_orders()
        if not result.ok:
            raise HTTPException(status_code=502, detail=result.error.message)
        return [ClassifiedOrder(record=r, classification=classify(r)) for r in result.data or []]

    @app.get("/api/purchase-orders/{pdf_name}", response_model=ClassifiedOrder)
    def get_purchase_order(pdf_name: str):
        result = record_store.fetch_purchase_order(pdf_name)
        if not result.ok:
            raise HTTPException(status_code=502, detail=result.error.message)
        if result.data is None:
            raise HTTPException(status_code=404, detail="Purchase order not found")
        return ClassifiedOrder(record=result.data, classification=classify(result.data))

    # ── Prompt rules ─────────────────────────────────────────────────────

    @app.get("/api/prompt-rules", response_model=PromptRulesView)
    async def list_prompt_rules():
        view = render_rules(await rules.refresh())
        if view.error:
            return _error_view(view)
        return view

    @app.get("/api/prompt-rules/{rule_id}", response_model=PromptRule)
    async def get_prompt_rule(rule_id: int):
        result = await rules.get(rule_id)
        if not result.ok:
            raise HTTPException(status_code=502, detail=result.error.message)
        if result.data is None:
            raise HTTPException(status_code=404, detail="Prompt rule not found")
        return result.data

    @app.post("/api/prompt-rules", response_model=PromptRulesView, status_code=201)
    async def create_prompt_rule(body: PromptRuleText):
        result = await rules.create(body.prompt)
        view = render_rules(rules.state)
        if not result.ok or view.error:
            return _error_view(view)
        return view

    @app.put("/api/prompt-rules/{rule_id}", response_model=PromptRulesView)
    async def update_prompt_rule(rule_id: int, body: PromptRuleText):
        result = await rules.update(rule_id, body.prompt)
        if result.ok and result.data is None:
            raise HTTPException(status_code=404, detail="Prompt rule not found")
        view = render_rules(rules.state)
        if not result.ok or view.error:
            return _error_view(view)
        return view

    @app.delete("/api/prompt-rules/{rule_id}", response_model=PromptRulesView)
    async def delete_prompt_rule(rule_id: int):
        result = await rules.delete(rule_id)
        if result.ok and not result.data:
            raise HTTPException(status_code=404, detail="Prompt rule not found")
        view = render_rules(rules.state)
        if not result.ok or view.error:
            return _error_view(view)
        return view

    return app


# Module-level app instance for uvicorn (CMD: uvicorn po_review.api:app)
app = create_app()

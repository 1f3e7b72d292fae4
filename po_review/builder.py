"""DashboardBuilder: wires the record store and workflow based on AppConfig."""
from po_review.config import AppConfig
from po_review.services.record_store.base import RecordStore, viewer_timezone
from po_review.services.record_store.memory import InMemoryRecordStore
from po_review.services.record_store.sql import SqlRecordStore
from po_review.nodes.fetch import FetchNode
from po_review.nodes.classify import ClassifyNode
from po_review.nodes.order import OrderNode
from po_review.nodes.summarize import SummarizeNode
from po_review.nodes.report import ReportNode
from po_review.workflow import build_graph


class DashboardBuilder:
    """Builds the dashboard workflow graph by wiring the store and nodes from config."""

    def __init__(self, config: AppConfig, store: RecordStore | None = None):
        self.config = config
        self._tz = viewer_timezone(config.timezone)
        self._store = store or self._build_store()

    @property
    def store(self) -> RecordStore:
        return self._store

    @property
    def tz(self):
        return self._tz

    def build(self):
        """Build and return a compiled LangGraph workflow."""
        return build_graph(
            fetch_node=FetchNode(store=self._store),
            classify_node=ClassifyNode(),
            order_node=OrderNode(),
            summarize_node=SummarizeNode(),
            report_node=ReportNode(),
        )

    def _build_store(self) -> RecordStore:
        if self.config.record_store == "memory":
            if self.config.seed_file:
                return InMemoryRecordStore.from_yaml(self.config.seed_file, tz=self._tz)
            return InMemoryRecordStore(tz=self._tz)
        if self.config.record_store == "sql":
            return SqlRecordStore.from_url(
                self.config.database_url,
                echo=self.config.database_echo,
                tz=self._tz,
            )
        raise ValueError(f"Unknown record store: {self.config.record_store}")

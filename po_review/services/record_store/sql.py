import logging
from collections.abc import Callable
from datetime import datetime, timezone, tzinfo

from sqlalchemy import create_engine, delete, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from po_review.core.prompt_rule import PromptRule
from po_review.core.purchase_order import PurchaseOrderRecord
from po_review.core.store_result import StoreResult
from po_review.services.record_store.base import RecordStore, todays_window
from po_review.services.record_store.tables import Base, PromptRuleRow, PurchaseOrderRow, naive_utc

logger = logging.getLogger("po_review.store")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def build_engine(database_url: str, echo: bool = False) -> Engine:
    connect_args = {}
    # SQLite connections are shared across the threadpool
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
    return create_engine(database_url, connect_args=connect_args, echo=echo, pool_pre_ping=True)


class SqlRecordStore(RecordStore):
    """Record store backed by any SQLAlchemy-supported database.

    Each call runs in its own session. ``SQLAlchemyError`` is logged and
    turned into an ``ErrorDescriptor``; nothing escapes to the caller.
    """

    def __init__(
        self,
        engine: Engine,
        tz: tzinfo = timezone.utc,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._engine = engine
        self._session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
        self._tz = tz
        self._clock = clock

    @classmethod
    def from_url(cls, database_url: str, echo: bool = False, **kwargs) -> "SqlRecordStore":
        return cls(build_engine(database_url, echo=echo), **kwargs)

    @property
    def engine(self) -> Engine:
        return self._engine

    def create_tables(self) -> None:
        Base.metadata.create_all(bind=self._engine)

    def _session(self) -> Session:
        return self._session_factory()

    def fetch_todays_purchase_orders(self) -> StoreResult[list[PurchaseOrderRecord]]:
        start, end = todays_window(self._tz, self._clock())
        query = (
            select(PurchaseOrderRow)
            .where(PurchaseOrderRow.created_at >= naive_utc(start))
            .where(PurchaseOrderRow.created_at < naive_utc(end))
            .order_by(PurchaseOrderRow.created_at.desc())
        )
        try:
            with self._session() as session:
                rows = session.scalars(query).all()
                return StoreResult.success([row.to_record() for row in rows])
        except SQLAlchemyError:
            logger.exception("Failed to fetch today's purchase orders")
            return StoreResult.failure("Failed to fetch purchase orders")

    def fetch_purchase_order(self, pdf_name: str) -> StoreResult[PurchaseOrderRecord]:
        query = (
            select(PurchaseOrderRow)
            .where(PurchaseOrderRow.pdf_name == pdf_name)
            .order_by(PurchaseOrderRow.created_at.desc())
            .limit(1)
        )
        try:
            with self._session() as session:
                row = session.scalars(query).first()
                return StoreResult(data=row.to_record() if row else None)
        except SQLAlchemyError:
            logger.exception(f"Failed to fetch purchase order {pdf_name}")
            return StoreResult.failure("Failed to fetch purchase order")

    def fetch_all_prompt_rules(self) -> StoreResult[list[PromptRule]]:
        query = select(PromptRuleRow).order_by(PromptRuleRow.created_at.desc(), PromptRuleRow.id.desc())
        try:
            with self._session() as session:
                return StoreResult.success([row.to_rule() for row in session.scalars(query)])
        except SQLAlchemyError:
            logger.exception("Failed to fetch prompt rules")
            return StoreResult.failure("Failed to fetch prompt rules from database")

    def fetch_prompt_rule(self, rule_id: int) -> StoreResult[PromptRule]:
        try:
            with self._session() as session:
                row = session.get(PromptRuleRow, rule_id)
                return StoreResult(data=row.to_rule() if row else None)
        except SQLAlchemyError:
            logger.exception(f"Failed to fetch prompt rule {rule_id}")
            return StoreResult.failure("Failed to fetch prompt rule from database")

    def create_prompt_rule(self, text: str) -> StoreResult[PromptRule]:
        now = naive_utc(self._clock())
        try:
            with self._session() as session, session.begin():
                row = PromptRuleRow(prompt=text, created_at=now, updated_at=now)
                session.add(row)
                session.flush()
                rule = row.to_rule()
            logger.info(f"Created prompt rule {rule.id}")
            return StoreResult.success(rule)
        except SQLAlchemyError:
            logger.exception("Failed to create prompt rule")
            return StoreResult.failure("Failed to create prompt rule")

    def update_prompt_rule(self, rule_id: int, text: str) -> StoreResult[PromptRule]:
        try:
            with self._session() as session, session.begin():
                row = session.get(PromptRuleRow, rule_id)
                if row is None:
                    return StoreResult(data=None)
                row.prompt = text
                row.updated_at = naive_utc(self._clock())
                session.flush()
                rule = row.to_rule()
            logger.info(f"Updated prompt rule {rule_id}")
            return StoreResult.success(rule)
        except SQLAlchemyError:
            logger.exception(f"Failed to update prompt rule {rule_id}")
            return StoreResult.failure("Failed to update prompt rule")

    def delete_prompt_rule(self, rule_id: int) -> StoreResult[bool]:
        try:
            with self._session() as session, session.begin():
                result = session.execute(delete(PromptRuleRow).where(PromptRuleRow.id == rule_id))
                deleted = result.rowcount > 0
            if deleted:
                logger.info(f"Deleted prompt rule {rule_id}")
            return StoreResult.success(deleted)
        except SQLAlchemyError:
            logger.exception(f"Failed to delete prompt rule {rule_id}")
            return StoreResult.failure("Failed to delete prompt rule")

    def add_purchase_orders(self, records: list[PurchaseOrderRecord]) -> None:
        """Insert records directly; the extraction process does this in production."""
        with self._session() as session, session.begin():
            session.add_all([PurchaseOrderRow.from_record(record) for record in records])

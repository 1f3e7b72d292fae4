"""E2E smoke test: SQL-backed app from a clean database to a rendered dashboard.

Runs the real lifespan (table creation), the LangGraph workflow and the SQL
record store against a throwaway SQLite file.
"""
from pathlib import Path

import yaml
from fastapi.testclient import TestClient

from po_review.api import create_app
from po_review.config import AppConfig
from po_review.core.purchase_order import PurchaseOrderRecord
from po_review.services.record_store.sql import SqlRecordStore
from tests.mocks import TODAY

FIXTURES = Path(__file__).parent.parent / "fixtures" / "purchase_orders.yaml"


def _seeded_records():
    with open(FIXTURES) as f:
        data = yaml.safe_load(f)
    return [PurchaseOrderRecord.model_validate(item) for item in data["purchase_orders"]]


class TestE2ESmoke:
    def setup_method(self):
        self.config = AppConfig(record_store="sql", timezone="UTC", _env_file=None)

    def test_dashboard_and_rules_round_trip(self, tmp_path):
        store = SqlRecordStore.from_url(f"sqlite:///{tmp_path / 'po.db'}", clock=lambda: TODAY)
        app = create_app(self.config, store=store)

        with TestClient(app) as client:
            store.add_purchase_orders(_seeded_records())

            body = client.get("/api/dashboard").json()
            assert [c["pdf_name"] for c in body["orders"]] == [
                "PO-GAMMA-0003.pdf",
                "PO-BETA-0002.pdf",
                "PO-ACME-0001.pdf",
            ]
            tiles = {t["label"]: t["value"] for t in body["metrics"]}
            assert tiles["Entries"] == 3
            assert tiles["Errors"] == 2
            assert tiles["Updated"] == "11:45:00 AM"

            body = client.post("/api/dashboard/cards/PO-ACME-0001.pdf/toggle").json()
            acme = next(c for c in body["orders"] if c["pdf_name"] == "PO-ACME-0001.pdf")
            assert acme["details"]["city"] == "Rotterdam"
            assert acme["details"]["total_including_tax"] == "EUR 1452.00"
            assert acme["line_items"][0]["unit_price"] == "12"

            response = client.post("/api/prompt-rules", json={"prompt": "  Always include tax. "})
            assert response.status_code == 201
            assert response.json()["rules"][0]["prompt"] == "Always include tax."

            rules = client.get("/api/prompt-rules").json()["rules"]
            assert [r["prompt"] for r in rules] == ["Always include tax."]

    def test_lifespan_creates_database_file(self, tmp_path):
        db_path = tmp_path / "nested" / "po.db"
        config = AppConfig(
            record_store="sql",
            database_url=f"sqlite:///{db_path}",
            timezone="UTC",
            _env_file=None,
        )

        with TestClient(create_app(config)) as client:
            assert client.get("/api/prompt-rules").status_code == 200

        assert db_path.exists()

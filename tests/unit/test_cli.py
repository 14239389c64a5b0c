from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from refdata import main
from refdata.domain.models import TradeRecord
from refdata.infrastructure.memory import InMemoryRecordStore
from refdata.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch):
    monkeypatch.setattr(main, "configure_from_settings", lambda settings: None)


def _write(tmp_path: Path, payload) -> Path:
    path = tmp_path / "candidates.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestInfoAndKinds:
    def test_info_shows_database_and_thresholds(self):
        result = runner.invoke(app, ["info"])
        assert result.exit_code == 0
        assert "DB=" in result.output
        assert "max_trade_value=" in result.output

    def test_kinds_lists_every_kind(self):
        result = runner.invoke(app, ["kinds"])
        assert result.exit_code == 0
        assert "curve_point" in result.output
        assert "rating" in result.output


class TestValidate:
    def test_all_accepted_exits_zero(self, tmp_path):
        path = _write(tmp_path, [{"name": "alpha"}, {"name": "beta"}])
        result = runner.invoke(app, ["validate", "rule", str(path), "--json"])
        assert result.exit_code == 0
        assert [r["status"] for r in json.loads(result.output)] == ["accepted", "accepted"]

    def test_rejection_exits_one(self, tmp_path):
        path = _write(tmp_path, [{"name": "alpha"}, {"name": "alpha"}])
        result = runner.invoke(app, ["validate", "rule", str(path)])
        assert result.exit_code == 1
        assert "rejected" in result.output

    def test_single_object_is_accepted(self, tmp_path):
        path = _write(tmp_path, {"fitchRating": "AA"})
        result = runner.invoke(app, ["validate", "rating", str(path), "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output)[0]["record"]["orderNumber"] == 1

    def test_unknown_kind_exits_two(self, tmp_path):
        path = _write(tmp_path, [])
        result = runner.invoke(app, ["validate", "iban", str(path)])
        assert result.exit_code == 2

    def test_invalid_json_file_exits_two(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[{\"name\": ", encoding="utf-8")
        result = runner.invoke(app, ["validate", "rule", str(path)])
        assert result.exit_code == 2
        assert "is not valid JSON" in result.output
        assert result.exception is None or isinstance(result.exception, SystemExit)

    @pytest.mark.parametrize("payload", [[{"name": "alpha"}, "beta"], 42])
    def test_non_object_candidates_exit_two(self, tmp_path, payload):
        path = _write(tmp_path, payload)
        result = runner.invoke(app, ["validate", "rule", str(path)])
        assert result.exit_code == 2

    def test_database_flag_uses_postgres_lookup(self, tmp_path, monkeypatch):
        store = InMemoryRecordStore(key_field="name")
        monkeypatch.setattr(
            "refdata.infrastructure.repositories.postgres_lookup", lambda kind: store
        )
        path = _write(tmp_path, [{"name": "alpha"}])
        result = runner.invoke(app, ["validate", "rule", str(path), "--database", "--json"])
        assert result.exit_code == 0
        assert len(store) == 0


class TestDeleteCheck:
    def test_missing_record(self, monkeypatch):
        monkeypatch.setattr(
            "refdata.infrastructure.repositories.postgres_lookup", lambda kind: InMemoryRecordStore()
        )
        result = runner.invoke(app, ["delete-check", "trade", "5"])
        assert result.exit_code == 1
        assert "Trade not found with id: 5" in result.output

    def test_existing_record(self, monkeypatch):
        store = InMemoryRecordStore()
        store.save(TradeRecord())
        monkeypatch.setattr("refdata.infrastructure.repositories.postgres_lookup", lambda kind: store)
        result = runner.invoke(app, ["delete-check", "trade", "1"])
        assert result.exit_code == 0
        assert "Trade 1 can be deleted." in result.output

import json

from typer.testing import CliRunner

from pagesync.cli import app
from pagesync.domain.query import query_fingerprint

runner = CliRunner()


def _write_items(tmp_path, items):
    path = tmp_path / "items.json"
    path.write_text(json.dumps(items), encoding="utf-8")
    return path


class TestFingerprintCommand:
    def test_prints_fingerprint(self):
        result = runner.invoke(app, ["fingerprint", '{"b": 1, "a": 2, "$limit": 5}'])

        assert result.exit_code == 0
        assert result.output.strip() == query_fingerprint({"a": 2, "b": 1})

    def test_invalid_json_exits_with_error(self):
        result = runner.invoke(app, ["fingerprint", "{not json"])

        assert result.exit_code == 1
        assert "Error:" in result.output


class TestBrowseCommand:
    def test_server_page(self, tmp_path, items):
        path = _write_items(tmp_path, items)

        result = runner.invoke(app, ["browse", str(path), "--page", "2"])

        assert result.exit_code == 0, result.output
        assert "Page 2 of 3 (25 items)" in result.output
        assert "item-11" in result.output
        assert "item-1 " not in result.output

    def test_local_filtered_page(self, tmp_path, items):
        path = _write_items(tmp_path, {"data": items})

        result = runner.invoke(
            app,
            ["browse", str(path), "--local", "-q", '{"group": "odd"}', "-l", "5", "-p", "3"],
        )

        assert result.exit_code == 0, result.output
        assert "Page 3 of 3 (13 items)" in result.output
        assert "item-25" in result.output

    def test_page_past_end_is_clamped(self, tmp_path, items):
        path = _write_items(tmp_path, items)

        result = runner.invoke(app, ["browse", str(path), "--page", "9"])

        assert result.exit_code == 0, result.output
        assert "Page 3 of 3" in result.output

    def test_items_without_ids_fail(self, tmp_path):
        path = _write_items(tmp_path, [{"name": "nameless"}])

        result = runner.invoke(app, ["browse", str(path), "--local"])

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "Unexpected error" not in result.output

    def test_query_must_be_object(self, tmp_path, items):
        path = _write_items(tmp_path, items)

        result = runner.invoke(app, ["browse", str(path), "-q", "[1, 2]"])

        assert result.exit_code != 0

    def test_unknown_query_operator_is_a_user_error(self, tmp_path, items):
        path = _write_items(tmp_path, items)

        result = runner.invoke(app, ["browse", str(path), "-q", '{"name": {"$regex": "item"}}'])

        assert result.exit_code == 1
        assert "Error: Unsupported query operator: $regex" in result.output
        assert "Unexpected error" not in result.output

"""
Tests for the process_json_to_report entry point.
"""

import json

import pytest

from JsonToReport.config.report_config import ReportConfigStore
from JsonToReport.main import process_json_to_report


class FakeRenderer:
    """Stands in for the reporting engine."""

    def __init__(self):
        self.calls = []

    def render(self, template_path, dataset):
        self.calls.append((template_path, dataset))
        return b"%PDF-1.7"


@pytest.fixture
def config_store(payroll_config):
    return ReportConfigStore({"Nomina": payroll_config})


class TestProcessJsonToReport:
    """Tests for process_json_to_report."""

    def test_builds_tables_without_renderer(self, payroll_document, config_store, id_store):
        """Test that the tables are returned when nothing is rendered."""
        result = process_json_to_report(payroll_document, "nomina", config_store, id_store=id_store)

        assert result.success
        assert result.output is None
        assert result.dataset.main_table_name == "Items"
        frames = result.dataset.frames()
        assert frames["Items"]["ItemsId"].tolist() == [1, 2]
        assert len(frames["Percepciones"]) == 3

    def test_renders_with_template(self, payroll_document, config_store, id_store, tmp_path):
        """Test that the renderer receives the template path and the tables."""
        (tmp_path / "Nomina.mrt").write_text("<template/>", encoding="utf-8")
        renderer = FakeRenderer()

        result = process_json_to_report(payroll_document, "Nomina", config_store, renderer=renderer,
                                        templates_folder=tmp_path, id_store=id_store)

        assert result.success
        assert result.output == b"%PDF-1.7"
        template_path, dataset = renderer.calls[0]
        assert template_path == tmp_path / "Nomina.mrt"
        assert "Deducciones" in dataset

    def test_missing_template_fails(self, payroll_document, config_store, id_store, tmp_path):
        """Test that a missing template is a failed result, not an exception."""
        renderer = FakeRenderer()
        result = process_json_to_report(payroll_document, "Nomina", config_store, renderer=renderer,
                                        templates_folder=tmp_path, id_store=id_store)
        assert not result.success
        assert "Nomina.mrt" in result.message
        assert renderer.calls == []

    def test_unknown_report_fails(self, payroll_document, config_store, id_store):
        """Test that an unknown report name is a failed result."""
        result = process_json_to_report(payroll_document, "Cfdi", config_store, id_store=id_store)
        assert not result.success
        assert "Cfdi" in result.message
        assert result.dataset is None

    @pytest.mark.parametrize("document", ["{oops", "\"just a string\"", 42])
    def test_bad_documents_fail(self, document, config_store, id_store):
        """Test that unusable documents fail the request without raising."""
        result = process_json_to_report(document, "Nomina", config_store, id_store=id_store)
        assert not result.success

    def test_root_object_without_main_property_is_one_record(self, config_store, id_store):
        """Test that a root object lacking an Items array becomes the single main record."""
        result = process_json_to_report({"Other": 1}, "Nomina", config_store, id_store=id_store)
        assert result.success
        assert len(result.dataset["Items"]) == 1


def deep_document(depth):
    node = {"c": "leaf"}
    for _ in range(depth - 1):
        node = {"N": node}
    return {"Items": [{"N": node}]}


class TestDeepDocuments:
    """Tests for deeply nested documents through the whole pipeline."""

    def test_deep_json_text(self, config_store, id_store):
        """Test that a 600-level JSON string still produces one successful result."""
        result = process_json_to_report(json.dumps(deep_document(600)), "Nomina", config_store,
                                        id_store=id_store)
        assert result.success
        assert len(result.dataset["N"]) == 600

    def test_deep_parsed_document(self, config_store, id_store):
        """Test a 2000-level parsed document end to end."""
        result = process_json_to_report(deep_document(2000), "Nomina", config_store, id_store=id_store)
        assert result.success
        assert len(result.dataset["N"]) == 2000

# Test configuration

import pytest

from JsonToReport.config.report_config import ReportConfig
from JsonToReport.core.tables import IdCounterStore


@pytest.fixture
def id_store():
    """Fresh id counters, so every test starts at id 1."""
    return IdCounterStore()


@pytest.fixture
def payroll_document():
    """Two payroll records: one with perceptions only, one with deductions only."""
    return {
        "Items": [
            {"Id": 1, "Percepciones": [{"c": "a"}]},
            {"Id": 2, "Deducciones": [{"c": "x"}, {"c": "y"}]},
        ]
    }


@pytest.fixture
def payroll_config():
    """Report config with Items as main source and one balance rule."""
    return ReportConfig.model_validate({
        "templateFile": "Nomina.mrt",
        "dataSourceMappings": {"Items": ""},
        "requiredDataSources": ["Items"],
        "rowBalanceRules": [{"tables": ["Percepciones", "Deducciones"]}],
    })

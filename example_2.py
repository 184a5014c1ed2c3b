import json
from JsonToReport.config import ReportConfig
from JsonToReport.core import JsonReportNormalizer
from JsonToReport.rendering import ReportDataSet

# Load your JSON data
with open("nomina.json", "r") as f:
    json_data = json.load(f)

# Configuration can also be built in code instead of loaded from a folder
config = ReportConfig.model_validate({
    "templateFile": "Nomina.mrt",
    "dataSourceMappings": {"Items": ""},
    "requiredDataSources": ["Items"],
    "rowBalanceRules": [
        {"tables": ["Percepciones", "Deducciones"], "minRowsPerTable": {"Percepciones": 3}},
    ],
})

# Step 1: Project the JSON onto balanced report tables
tables, main_table_name = JsonReportNormalizer.normalize_json_to_tables(json_data, config)

# Step 2: Hand the tables over as pandas DataFrames
dataset = ReportDataSet.from_tables(tables, main_table_name)
for name, frame in dataset.frames().items():
    print(f"-- {name}")
    print(frame.to_string(index=False))

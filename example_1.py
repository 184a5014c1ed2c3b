import json
from JsonToReport import ReportConfigStore, process_json_to_report

# Load your JSON data
with open("nomina.json", "r") as f:
    json_data = json.load(f)

# One <report name>.json per report in this folder
config_store = ReportConfigStore.load_folder("Configs")

# Basic Example: build the report tables in one step
result = process_json_to_report(json_data, "Nomina", config_store)

if not result.success:
    raise SystemExit(result.message)

for table_name, row_count in result.dataset.summary():
    print(f"Table: {table_name}, Rows: {row_count}")

"""Generate JSON schemas from Pydantic models and save to schemas/ directory."""

import json
from pathlib import Path

from droidport.contracts import AnalysisResult, NormalizeResult, PluginAnalysis
from droidport.kernel.catalog import ToolCatalog


SCHEMAS = {
    "tool_catalog.schema.json": ToolCatalog,
    "analysis_result.schema.json": AnalysisResult,
    "normalize_result.schema.json": NormalizeResult,
    "plugin_analysis.schema.json": PluginAnalysis,
}


def generate_schemas(schemas_dir: Path = None):
    """Generate JSON schemas for all public models."""
    schemas_dir = schemas_dir or Path(__file__).parent.parent / "schemas"
    schemas_dir.mkdir(exist_ok=True)

    for filename, model in SCHEMAS.items():
        path = schemas_dir / filename
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(model.model_json_schema(), f, indent=2, ensure_ascii=False)
        print(f"Generated: {path}")

    print("\nSchema generation complete!")


if __name__ == "__main__":
    generate_schemas()

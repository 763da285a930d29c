"""
JSON Schema generator for the engine's input contract.

This module generates the JSON schema of the client record accepted by the
engine and saves it to a file for use by the web layer.
"""

import json
from pathlib import Path
from typing import Any, Dict

from .account import ClientRecord


def generate_client_schema() -> Dict[str, Any]:
    """Generate JSON schema for the ClientRecord model."""
    return ClientRecord.model_json_schema()


def save_client_schema(output_path: Path) -> None:
    """Save the client record JSON schema to a file."""
    schema = generate_client_schema()

    # Add metadata to the schema
    schema.update(
        {
            "$schema": "http://json-schema.org/draft-07/schema#",
            "title": "Debt Portfolio Client Record Schema v0.1",
            "description": "Schema for a client credit score, monthly income and the credit accounts analyzed by the debt engine",
        }
    )

    with open(output_path, "w") as f:
        json.dump(schema, f, indent=2)


if __name__ == "__main__":
    # Generate and save the schema when run directly
    schema_path = Path(__file__).parent.parent.parent / "schema" / "client_record_v0_1.json"
    schema_path.parent.mkdir(parents=True, exist_ok=True)
    save_client_schema(schema_path)
    print(f"Schema saved to {schema_path}")

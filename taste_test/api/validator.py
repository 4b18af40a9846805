import json
import os
from typing import Any, Dict, Tuple

from jsonschema import ValidationError, validate

# Path: taste_test/api/schemas/
SCHEMA_DIR = os.path.join(
    os.path.dirname(__file__),
    "schemas"
)

# Mapping request body → schema filename
PAYLOAD_SCHEMAS = {
    "signup": "signup.json",
    "signin": "signin.json",
    "message": "message.json",
    "ui_action": "ui_action.json",
}


def load_schema(name: str) -> Dict[str, Any]:
    """
    Load the JSON schema file for a given request body.
    """
    filename = PAYLOAD_SCHEMAS[name]
    path = os.path.join(SCHEMA_DIR, filename)

    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def validate_payload(name: str, data: Any) -> Tuple[bool, str]:
    """
    Validate a request body against its JSON schema.

    Returns:
        (True, "") if valid
        (False, "<error message>") if invalid
    """
    schema = load_schema(name)

    try:
        validate(instance=data, schema=schema)
        return True, ""
    except ValidationError as e:
        return False, e.message

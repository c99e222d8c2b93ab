#!/usr/bin/env python3
"""Export the environment-variable surface of all settings classes as JSON.

Usage:
    python scripts/export_settings.py [output_path]

Without an output path the JSON is written to docs/env-vars.json.
"""

import json
import sys
from pathlib import Path
from typing import Type

from pydantic import SecretStr
from pydantic_settings import BaseSettings

root_path = Path(__file__).parent.parent
sys.path.insert(0, str(root_path / "src" / "multitenancy"))

from infrastructure.settings import (  # noqa: E402
    DatabaseSettings,
    IsolationSettings,
    MultitenancySettings,
)


def get_model_metadata(settings_class: Type[BaseSettings]):
    prefix = settings_class.model_config.get("env_prefix", "")
    properties = []

    for name, field in settings_class.model_fields.items():
        type_name = getattr(field.annotation, "__name__", str(field.annotation))
        default = field.get_default(call_default_factory=True)

        # Required when there is no default or the default is an empty secret
        is_required = "PydanticUndefined" in str(default) or (
            isinstance(default, SecretStr) and default.get_secret_value() == ""
        )

        if isinstance(default, SecretStr):
            display_default = None if is_required else "********"
        elif is_required or default is None:
            display_default = None
        elif isinstance(default, list):
            display_default = json.dumps(default)
        else:
            display_default = str(default)

        properties.append(
            {
                "env_var": f"{prefix}{name.upper()}",
                "type": "Secret" if "Secret" in type_name else type_name,
                "default": display_default,
                "required": is_required,
                "description": field.description or "",
            }
        )

    return {
        "class_name": settings_class.__name__,
        "prefix": prefix,
        "doc": settings_class.__doc__ or "",
        "properties": properties,
    }


def export_settings(output_path: Path | None = None) -> Path:
    classes = [
        MultitenancySettings,
        IsolationSettings,
        DatabaseSettings,
    ]

    data = {cls.__name__: get_model_metadata(cls) for cls in classes}

    output_path = output_path or root_path / "docs" / "env-vars.json"
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w") as f:
        json.dump(data, f, indent=2)

    print(f"Exported settings to {output_path}")
    return output_path


if __name__ == "__main__":
    export_settings(Path(sys.argv[1]) if len(sys.argv) > 1 else None)

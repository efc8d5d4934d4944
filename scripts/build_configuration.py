#!/usr/bin/env python3
"""
Build an app configuration document offline, without running the API.
Usage: python scripts/build_configuration.py REFERENCE_DB WIZARD_JSON [--output-dir DIR]

WIZARD_JSON has the same shape as the POST /v1/configurations body. Objects that
carry names but no childClassLangId are resolved against REFERENCE_DB first.
"""
import argparse
import json
import sys
from pathlib import Path

from app.core.config import settings
from app.core.errors import AppBuilderError
from app.core.logging import configure_logging
from app.schemas.configurations import CreateConfigurationRequest
from app.services.artifacts import ArtifactStore
from app.services.assembler import build_configuration
from app.services.resolver import resolve_class
from app.store.reference import ReferenceStore


def resolve_objects(store: ReferenceStore, objects) -> None:
    """Fill in class identifiers for objects that only carry names."""
    for obj in objects or []:
        if obj.child_class_lang_id is not None or not (obj.child_object_name and obj.child_class_name):
            continue
        try:
            resolution = resolve_class(store, obj.child_object_name, obj.child_class_name, obj.parent_object_name)
        except AppBuilderError as e:
            print(f"⚠️  {obj.child_object_name}: {e.message}")
            continue
        obj.child_class_lang_id = resolution.child_class_lang_id
        obj.child_class_id = resolution.child_class_id
        obj.parent_class_lang_id = resolution.parent_class_lang_id


def main():
    parser = argparse.ArgumentParser(description="Build an app configuration document from a wizard JSON file")
    parser.add_argument("reference_db", type=Path, help="Path to the reference SQLite database")
    parser.add_argument("wizard_json", type=Path, help="Configuration request JSON")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path(settings.output_dir),
        help="Directory the document is written to (default: OUTPUT_DIR setting)",
    )
    args = parser.parse_args()
    configure_logging(settings.log_level)

    try:
        payload = json.loads(args.wizard_json.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        print(f"❌ Could not read {args.wizard_json}: {e}")
        sys.exit(1)

    req = CreateConfigurationRequest.model_validate(payload)
    inputs = req.to_assembly_inputs()

    try:
        store = ReferenceStore.open(args.reference_db)
        try:
            resolve_objects(store, inputs["objects"])
        finally:
            store.close()

        generated = build_configuration(**inputs)
        file_path = ArtifactStore(args.output_dir).write(generated.file_name, generated.document)
    except AppBuilderError as e:
        print(f"❌ {e.message}")
        if e.details:
            print(json.dumps(e.details, indent=2))
        sys.exit(1)

    print("✅ Configuration created")
    print(f"📝 File: {generated.file_name}")
    print(f"🔗 Path: {file_path.absolute()}")
    print(f"📊 Objects: {len(generated.document['inputProperties'])}")


if __name__ == "__main__":
    main()

"""Script to generate openapi.yaml for the config builder API and save it for inspection."""
import json
import yaml
from pathlib import Path
from app.main import create_app

# Use a persistent directory in the project
output_dir = Path(__file__).parent.parent / "test_output"
output_dir.mkdir(exist_ok=True)

schema = create_app().openapi()

openapi_path = output_dir / "openapi.yaml"
openapi_path.write_text(yaml.safe_dump(schema, sort_keys=False, allow_unicode=True), encoding="utf-8")
json_path = output_dir / "openapi.json"
json_path.write_text(json.dumps(schema, indent=2), encoding="utf-8")

print("=" * 60)
print("OPENAPI.YAML GENERATION")
print("=" * 60)
print(f"Title: {schema['info']['title']} {schema['info']['version']}")
print(f"Paths: {len(schema.get('paths', {}))}")
for path, operations in schema.get("paths", {}).items():
    print(f"  {', '.join(m.upper() for m in operations)} {path}")
print(f"\nGenerated file location:")
print(f"  {openapi_path.absolute()}")
print(f"  {json_path.absolute()}")

"""Fixed choices offered by the wizard."""
from dataclasses import dataclass
from typing import List

ENGINE_VERSIONS = ["11.0 R02", "11.0 R01", "10.0 R08", "10.0 R07", "10.0 R06", "10.0 R05"]
OPERATING_SYSTEMS = ["Linux", "Windows"]
CORE_COUNTS = [2, 4, 8, 16, 20, 32, 48, 64]
MEMORY_SIZES = ["16GB", "32GB", "64GB", "128GB", "160GB", "256GB", "384GB", "512GB"]

# Values a fresh wizard starts with. They differ from the document defaults on purpose.
INITIAL_ENGINE_VERSION = "10.0 R07"
INITIAL_OPERATING_SYSTEM = "Linux"
INITIAL_CORES = 16
INITIAL_MEMORY = "128GB"


@dataclass(frozen=True)
class WizardStep:
    id: int
    name: str
    description: str


WIZARD_STEPS: List[WizardStep] = [
    WizardStep(1, "Basic Info", "Study and model information"),
    WizardStep(2, "Database", "Upload reference database"),
    WizardStep(3, "Objects", "Configure objects and properties"),
    WizardStep(4, "Run Config", "Engine and resource settings"),
    WizardStep(5, "Generate", "Create JSON configuration"),
]


def as_dict() -> dict:
    return {
        "engineVersions": ENGINE_VERSIONS,
        "operatingSystems": OPERATING_SYSTEMS,
        "cores": CORE_COUNTS,
        "memory": MEMORY_SIZES,
        "propertyTypes": [
            {"value": "0", "label": "Text Field"},
            {"value": "1", "label": "File Picker"},
        ],
        "steps": [{"id": s.id, "name": s.name, "description": s.description} for s in WIZARD_STEPS],
    }

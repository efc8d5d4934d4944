import logging
from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse
from app.api.deps import get_artifacts, get_store
from app.schemas.common import MessageResponse
from app.schemas.configurations import (
    ConfigurationCreated,
    ConfigurationInfo,
    ConfigurationsResponse,
    CreateConfigurationRequest,
)
from app.services.artifacts import ArtifactStore
from app.services.assembler import build_configuration
from app.store.reference import ReferenceStore

log = logging.getLogger(__name__)

router = APIRouter(prefix="/configurations")

@router.post("", response_model=ConfigurationCreated)
def create_configuration(
    req: CreateConfigurationRequest,
    store: ReferenceStore = Depends(get_store),
    artifacts: ArtifactStore = Depends(get_artifacts),
):
    generated = build_configuration(**req.to_assembly_inputs())
    file_path = artifacts.write(generated.file_name, generated.document)
    log.info("Configuration %s created", generated.file_name, extra={"store_id": store.store_id})
    return ConfigurationCreated(
        message="JSON configuration created successfully",
        file_name=generated.file_name,
        file_path=str(file_path),
        configuration=generated.document,
    )

@router.get("", response_model=ConfigurationsResponse)
def list_configurations(artifacts: ArtifactStore = Depends(get_artifacts)):
    return ConfigurationsResponse(configurations=[
        ConfigurationInfo(file_name=a.file_name, file_path=a.file_path, created_at=a.created_at)
        for a in artifacts.list()
    ])

@router.get("/{file_name}")
def download_configuration(file_name: str, artifacts: ArtifactStore = Depends(get_artifacts)):
    file_path = artifacts.path_for(file_name)
    return FileResponse(file_path, media_type="application/json", filename=file_name)

@router.delete("/{file_name}", response_model=MessageResponse)
def delete_configuration(file_name: str, artifacts: ArtifactStore = Depends(get_artifacts)):
    artifacts.delete(file_name)
    return MessageResponse(message=f"Configuration {file_name} deleted")

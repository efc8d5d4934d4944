"""Resolution, assembly, artifact and upload services."""

"""VHM: Apache VHost Manager CLI and core services."""

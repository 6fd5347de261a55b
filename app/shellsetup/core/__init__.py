"""Core provisioning logic: platform detection, backups, sequencing."""

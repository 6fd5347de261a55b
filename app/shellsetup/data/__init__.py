"""Configuration files bundled with shellsetup."""

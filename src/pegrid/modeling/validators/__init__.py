from .framework_validator import validate_forcefield, validate_framework, validate_grid_config

__all__ = ["validate_framework", "validate_forcefield", "validate_grid_config"]

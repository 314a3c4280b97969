from digevo.config.loader import build_resources, load_simulation_config

__all__ = [
    "build_resources",
    "load_simulation_config",
]

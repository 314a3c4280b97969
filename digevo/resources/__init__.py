from digevo.resources.pool import (
    BasicResource,
    NullResourcePool,
    Resource,
    ResourcePool,
    Resources,
    UnlimitedResource,
)

__all__ = [
    "BasicResource",
    "NullResourcePool",
    "Resource",
    "ResourcePool",
    "Resources",
    "UnlimitedResource",
]

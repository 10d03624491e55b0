from blogapi.configs.settings import pool_kwargs, settings

__all__ = [
    "pool_kwargs",
    "settings",
]

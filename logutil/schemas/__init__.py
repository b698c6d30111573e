from logutil.schemas.log_config import LogConfigSchema

__all__ = ["LogConfigSchema"]

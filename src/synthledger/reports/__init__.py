from .export import write_parquet

__all__ = ["write_parquet"]

from .Logger import CollectionLogger, get_logger

__all__ = ["CollectionLogger", "get_logger"]

from .common import CamelModel, DeletedRes, RequestModel

__all__ = ["CamelModel", "DeletedRes", "RequestModel"]

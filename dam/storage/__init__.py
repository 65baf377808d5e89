from .box import BoxStorage, UploadedFile

__all__ = ["BoxStorage", "UploadedFile"]

from .media_uploader import MediaUploader, MediaUploadResult

__all__ = ["MediaUploader", "MediaUploadResult"]

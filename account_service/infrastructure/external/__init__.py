"""External service clients for communicating with external systems"""

from .cloudinary_uploader import CloudinaryMediaUploader, sign_upload_params

__all__ = [
    "CloudinaryMediaUploader",
    "sign_upload_params",
]

from .temp_uploads import save_upload_to_temp, remove_temp_files

__all__ = ["save_upload_to_temp", "remove_temp_files"]

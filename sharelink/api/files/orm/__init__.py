from sharelink.api.files.orm.file_model import FileModel

__all__ = ["FileModel"]

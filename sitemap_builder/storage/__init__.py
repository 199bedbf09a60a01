# Storage module
from sitemap_builder.storage.files import FileWriter, LocalFileWriter, file_modified_time, folder_exists

__all__ = ["FileWriter", "LocalFileWriter", "file_modified_time", "folder_exists"]

from docpreview.models.file_record import FileRecord

__all__ = ["FileRecord"]

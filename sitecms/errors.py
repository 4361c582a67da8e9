# sitecms/errors.py
# Domain errors raised by services; the HTTP layers translate them.
from __future__ import annotations


class SiteCMSError(Exception):
    status_code = 400


class NotFoundError(SiteCMSError):
    status_code = 404

    def __init__(self, kind: str, key: str):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} not found: {key}")


class InvalidPageIdError(SiteCMSError):
    status_code = 400

    def __init__(self, page_id: str):
        self.page_id = page_id
        super().__init__(f"Invalid page id: {page_id!r}")


class BlockIndexError(SiteCMSError, IndexError):
    status_code = 400

    def __init__(self, index: int, length: int):
        self.index = index
        self.length = length
        super().__init__(f"Block index {index} out of range for {length} block(s)")


class SectionValidationError(SiteCMSError, ValueError):
    status_code = 422

    def __init__(self, section_id: str, path: str, message: str):
        self.section_id = section_id
        self.path = path
        super().__init__(f"{section_id}: validation error at '{path}': {message}")


class UploadValidationError(SiteCMSError, ValueError):
    status_code = 400


class PayloadTooLargeError(SiteCMSError):
    status_code = 413


class ConflictError(SiteCMSError):
    status_code = 409

    def __init__(self, kind: str, key: str):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} already exists: {key}")


class UnknownSectionError(SiteCMSError):
    status_code = 404

    def __init__(self, section_id: str):
        self.section_id = section_id
        super().__init__(f"Unknown section type: {section_id}")


class UnknownBlockTypeError(SiteCMSError, ValueError):
    status_code = 400

    def __init__(self, block_type: str):
        self.block_type = block_type
        super().__init__(f"Unknown block type: {block_type}")

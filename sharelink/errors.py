"""Errors surfaced by the upload and download services.

Each error carries the HTTP status and the generic message shown to the
end user. Details belong in the server log, never in ``public_message``.
"""


class ShareError(Exception):
    status_code = 500
    public_message = "Something went wrong"

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.public_message)
        self.detail = detail or self.public_message


class FileTooLarge(ShareError):
    status_code = 413
    public_message = "File size exceeds 250MB limit"


class InvalidFilename(ShareError):
    status_code = 400
    public_message = "Filename is missing or too long (max 255 characters)"


class UnusablePassword(ShareError):
    status_code = 400
    public_message = "Password contains unsupported characters"


class UnsupportedType(ShareError):
    status_code = 415
    public_message = "File type is not supported"


class RateLimited(ShareError):
    status_code = 429
    public_message = "Upload limit exceeded. Try again tomorrow."


class StorageWriteFailed(ShareError):
    status_code = 502
    public_message = "Failed to upload file"


class MetadataWriteFailed(ShareError):
    status_code = 500
    public_message = "Failed to upload file"


# Not found, expired and deleted files all answer the same way so a share id
# never reveals whether it once existed.
class FileNotFound(ShareError):
    status_code = 404
    public_message = "File not found or has expired"


class FileExpired(FileNotFound):
    pass


class InvalidPassword(ShareError):
    status_code = 403
    public_message = "Invalid password"


class SignedUrlFailed(ShareError):
    status_code = 502
    public_message = "Failed to generate download URL"


class StoreUnavailable(ShareError):
    status_code = 503
    public_message = "Service temporarily unavailable"

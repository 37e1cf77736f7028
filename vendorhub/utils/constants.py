"""
vendorhub/utils/constants.py

Purpose: Centralized static content

- All user-facing status messages returned to the mobile app
- Media kinds and content type defaults

(Prevents hardcoding across the codebase)
"""

# ============================================================
# VERIFICATION
# ============================================================

SIGNUP_CODE_SENT = "OTP sent for signup"
SIGNUP_CODE_RESENT = "OTP sent again for signup"
SIGNUP_SUCCESSFUL = "Signup successful"
LOGIN_CODE_SENT = "OTP sent for login"
LOGIN_SUCCESSFUL = "Login successful"

# Provider verdict meaning the code matched
OTP_APPROVED = "approved"

# ============================================================
# CATALOG
# ============================================================

RECORD_INSERTED = "{label} inserted successfully"
RECORD_UPDATED = "{label} updated successfully"
RECORD_DELETED = "{label} deleted successfully"
RECORD_NOT_FOUND = "{label} not found"
RECORD_NOT_FOUND_FOR_EDIT = "{label} not found or not authorized to edit"
RECORD_NOT_FOUND_FOR_DELETE = "{label} not found or not authorized to delete"
RECORD_UPDATE_FAILED = "{label} update failed"
NO_RECORDS_FOUND = "No {label_plural} found"

# ============================================================
# ATTACHMENTS
# ============================================================

MEDIA_IMAGE = "image"
MEDIA_VIDEO = "video"

ATTACHMENT_NOT_FOUND = "{media} not found"
FILE_TOO_LARGE = "File exceeds the {limit_mb} MB upload limit"

# Served when a stored file carries no content type
DEFAULT_CONTENT_TYPES = {
    MEDIA_IMAGE: "application/octet-stream",
    MEDIA_VIDEO: "video/mp4",
}

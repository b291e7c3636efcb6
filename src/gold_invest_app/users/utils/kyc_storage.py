import os
import shutil
import logging
from typing import Dict, Optional
from fastapi import HTTPException, UploadFile, status
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
MAX_KYC_FILE_SIZE = 5 * 1024 * 1024  # 5MB
ALLOWED_EXTENSIONS = {".jpeg", ".jpg", ".png", ".pdf"}
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png", "application/pdf"}

# Document field -> multipart form field name
KYC_FILE_FIELDS = {
    "id_proof": "idProof",
    "address_proof": "addressProof",
    "selfie": "selfie",
}


def _file_size(upload: UploadFile) -> int:
    upload.file.seek(0, os.SEEK_END)
    size = upload.file.tell()
    upload.file.seek(0)
    return size


def validate_kyc_file(upload: UploadFile) -> str:
    """
    Check type and size of an uploaded KYC document and return its extension.
    """
    extension = os.path.splitext(upload.filename or "")[1].lower()
    if extension not in ALLOWED_EXTENSIONS or upload.content_type not in ALLOWED_CONTENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only images (jpg, jpeg, png) and PDF files are allowed",
        )
    if _file_size(upload) > MAX_KYC_FILE_SIZE:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File too large. Maximum size is 5MB",
        )
    return extension


def save_kyc_files(user_id, files: Dict[str, Optional[UploadFile]]) -> Dict[str, str]:
    """
    Store uploaded KYC files under uploads/kyc/<user id>/ and return
    {document field: web path} for the files that were actually sent.
    Every file is validated before anything is written.
    """
    uploads = {field: upload for field, upload in files.items() if upload is not None and upload.filename}
    extensions = {field: validate_kyc_file(upload) for field, upload in uploads.items()}

    if not uploads:
        return {}

    kyc_dir = os.path.join(UPLOAD_DIR, "kyc", str(user_id))
    if not os.path.exists(kyc_dir):
        os.makedirs(kyc_dir)

    stored = {}
    for field, upload in uploads.items():
        filename = f"{KYC_FILE_FIELDS[field]}{extensions[field]}"
        file_path = os.path.join(kyc_dir, filename)
        with open(file_path, "wb") as buffer:
            shutil.copyfileobj(upload.file, buffer)
        stored[field] = f"/uploads/kyc/{user_id}/{filename}"
        logger.info(f"Stored KYC document {filename} for user {user_id}")

    return stored

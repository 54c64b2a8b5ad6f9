import logging

from fastapi import APIRouter, HTTPException, Depends, Response
from motor.motor_asyncio import AsyncIOMotorDatabase

from coursehub.auth.auth_permissions import UserContext, get_current_user
from coursehub.certificates.certificate_renderer import render_certificate_pdf
from coursehub.certificates.certificate_schemas import CertificateCreate
from coursehub.database import get_db, serialize_mongo, serialize_many, to_object_id, utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user/certificates", tags=["Certificates"])


async def get_owned_certificate(db: AsyncIOMotorDatabase, certificate_id: str, user: UserContext) -> dict:
    """A certificate only resolves for the user it was issued to"""
    cert_id = to_object_id(certificate_id)
    owner_id = to_object_id(user.user_id)
    cert = None
    if cert_id and owner_id:
        cert = await db.certificates.find_one({"_id": cert_id, "user": owner_id})
    if not cert:
        raise HTTPException(status_code=404, detail="Certificate not found")
    return cert

# ==================== ENDPOINTS ====================

@router.get("")
async def list_certificates(
    db: AsyncIOMotorDatabase = Depends(get_db),
    user: UserContext = Depends(get_current_user)
):
    try:
        owner_id = to_object_id(user.user_id)
        certificates = await db.certificates.find({"user": owner_id}).sort("created_at", -1).to_list(length=None)
        return serialize_many(certificates)
    except Exception:
        logger.exception("Certificates fetch error")
        raise HTTPException(status_code=500, detail="Failed to fetch certificates")


@router.post("")
async def create_certificate(
    data: CertificateCreate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user: UserContext = Depends(get_current_user)
):
    """
    Issue a certificate record for the caller

    Name and title are stored as given, so later renames do not alter it.
    """
    try:
        now = utcnow()
        cert = {
            "user": to_object_id(user.user_id),
            "course_title": data.course_title,
            "student_name": data.student_name,
            "date": data.date or now.strftime("%Y-%m-%d"),
            "created_at": now,
        }
        result = await db.certificates.insert_one(cert)
        cert["_id"] = result.inserted_id
        return serialize_mongo(cert)
    except Exception:
        logger.exception("Certificate create error")
        raise HTTPException(status_code=500, detail="Failed to create certificate")


@router.get("/{certificate_id}")
async def get_certificate(
    certificate_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user: UserContext = Depends(get_current_user)
):
    try:
        return serialize_mongo(await get_owned_certificate(db, certificate_id, user))
    except HTTPException:
        raise
    except Exception:
        logger.exception("Certificate fetch error")
        raise HTTPException(status_code=500, detail="Failed to fetch certificate")


@router.get("/{certificate_id}/pdf")
async def download_certificate(
    certificate_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user: UserContext = Depends(get_current_user)
):
    try:
        cert = await get_owned_certificate(db, certificate_id, user)
        pdf_bytes = render_certificate_pdf(
            name=cert.get("student_name", ""),
            course_title=cert.get("course_title", ""),
            date=cert.get("date", ""),
        )
        return Response(
            content=pdf_bytes,
            media_type="application/pdf",
            headers={"Content-Disposition": f"attachment; filename=certificate_{certificate_id}.pdf"}
        )
    except HTTPException:
        raise
    except Exception:
        logger.exception("Certificate render error")
        raise HTTPException(status_code=500, detail="Error generating certificate")

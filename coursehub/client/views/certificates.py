from typing import Optional

from coursehub.certificates.certificate_renderer import render_certificate_pdf
from coursehub.client.gateway import ApiError
from coursehub.client.views.base import Page


class CertificatesPage(Page):
    requires_auth = True

    def load(self) -> dict:
        try:
            return {"certificates": self.gateway.get("/user/certificates") or []}
        except ApiError as e:
            self.fail(e, "Failed to load certificates")
            return {"certificates": []}

    def claim(self, course_title: str) -> Optional[dict]:
        """Issue a certificate in the logged-in user's name"""
        student_name = (self.auth.user or {}).get("name") or "Student"
        try:
            cert = self.gateway.post(
                "/user/certificates",
                json={"course_title": course_title, "student_name": student_name},
            )
        except ApiError as e:
            self.fail(e, "Failed to create certificate")
            return None
        self.toaster.success("Certificate issued")
        return cert


class CertificateViewPage(Page):
    requires_auth = True

    def __init__(self, app, certificate_id: str):
        super().__init__(app)
        self.certificate_id = certificate_id
        self.certificate: Optional[dict] = None

    def load(self) -> dict:
        try:
            self.certificate = self.gateway.get(f"/user/certificates/{self.certificate_id}")
        except ApiError as e:
            self.fail(e, "Failed to load certificate")
        return {"certificate": self.certificate}

    def download(self) -> Optional[bytes]:
        """Render the PDF locally from the stored fields"""
        if not self.certificate:
            return None
        try:
            pdf = render_certificate_pdf(
                name=self.certificate.get("student_name", ""),
                course_title=self.certificate.get("course_title", ""),
                date=self.certificate.get("date", ""),
            )
        except (OSError, ValueError):
            self.toaster.error("Error generating certificate")
            return None
        self.toaster.success("Downloaded")
        return pdf

    @property
    def filename(self) -> str:
        title = (self.certificate or {}).get("course_title", "certificate")
        return f"{title.replace(' ', '_')}_certificate.pdf"

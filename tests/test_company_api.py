"""Tests for company registration, self-service and admin review endpoints."""

import os

from jobboard.core.constants import CompanyStatus, Role
from jobboard.models import Company
from tests.conftest import PASSWORD, auth_headers


def registration_fields(province_id, **overrides) -> dict:
    fields = {
        "email": "talent@globex.vn",
        "password": PASSWORD,
        "name": "Globex Vietnam",
        "address": "8 Nguyen Hue",
        "provinceId": str(province_id),
        "taxCode": "0309876543",
        "website": "https://globex.vn",
    }
    fields.update(overrides)
    return fields


def registration_files() -> dict:
    return {
        "businessLicense": ("license.pdf", b"%PDF-1.4 license", "application/pdf"),
        "logo": ("logo.png", b"\x89PNG logo", "image/png"),
    }


def uploaded(storage) -> list:
    return [f for _, _, files in os.walk(storage.root_dir) for f in files]


class TestRegister:
    url = "/api/v1/company/register"

    async def test_register(self, client, factory, storage):
        province = await factory.province()

        response = await client.post(self.url, data=registration_fields(province.id), files=registration_files())

        assert response.status_code == 201
        body = response.json()
        assert body["message_code"] == "CREATED_SUCCESS"
        data = body["data"]
        assert data["status"] == CompanyStatus.PENDING.value
        assert data["reasonReject"] is None
        assert data["province"]["id"] == str(province.id)
        assert data["logo"].startswith("/uploads/logos/")
        assert len(uploaded(storage)) == 2

    async def test_missing_license(self, client, factory, storage):
        province = await factory.province()
        files = registration_files()
        del files["businessLicense"]

        response = await client.post(self.url, data=registration_fields(province.id), files=files)

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "businessLicense"
        assert uploaded(storage) == []

    async def test_invalid_fields_report_each_field(self, client, factory, storage):
        province = await factory.province()
        fields = registration_fields(province.id, email="nope", taxCode="12")

        response = await client.post(self.url, data=fields, files=registration_files())

        assert response.status_code == 400
        assert {e["field"] for e in response.json()["errors"]} == {"email", "taxCode"}
        assert uploaded(storage) == []

    async def test_duplicate_email(self, client, factory, storage):
        province = await factory.province()
        await factory.company(email="talent@globex.vn")

        response = await client.post(self.url, data=registration_fields(province.id), files=registration_files())

        assert response.status_code == 409
        assert response.json()["error_code"] == "EMAIL_ALREADY_EXISTS"
        assert uploaded(storage) == []


class TestVerificationStatus:
    url = "/api/v1/company/verification-status"

    async def test_found(self, client, factory):
        company = await factory.company(status=CompanyStatus.PENDING)

        response = await client.get(self.url, params={"email": company.email})

        assert response.status_code == 200
        assert response.json()["data"]["status"] == CompanyStatus.PENDING.value

    async def test_email_required(self, client):
        response = await client.get(self.url)

        assert response.status_code == 400
        assert response.json()["error_code"] == "EMAIL_REQUIRED"

    async def test_unknown(self, client):
        response = await client.get(self.url, params={"email": "nobody@example.com"})

        assert response.status_code == 404
        assert response.json()["error_code"] == "NOT_FOUND"


class TestProfile:
    url = "/api/v1/company/profile"

    async def test_update(self, client, factory, storage):
        province = await factory.province()
        company = await factory.company()

        response = await client.put(
            self.url,
            data={"description": "Hiring engineers", "address": "22 Le Loi", "provinceId": str(province.id)},
            files={"logo": ("new.png", b"\x89PNG new", "image/png")},
            headers=auth_headers(company.account_id, Role.COMPANY),
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["description"] == "Hiring engineers"
        assert data["province"]["name"] == province.name
        assert data["logo"].startswith("/uploads/logos/")

    async def test_pending_company_gets_404_and_logo_is_removed(self, client, factory, storage):
        province = await factory.province()
        company = await factory.company(status=CompanyStatus.PENDING)

        response = await client.put(
            self.url,
            data={"address": "22 Le Loi", "provinceId": str(province.id)},
            files={"logo": ("new.png", b"\x89PNG new", "image/png")},
            headers=auth_headers(company.account_id, Role.COMPANY),
        )

        assert response.status_code == 404
        assert uploaded(storage) == []

    async def test_admin_has_no_profile(self, client, factory):
        admin = await factory.admin()

        response = await client.put(self.url, data={"address": "22 Le Loi"}, headers=auth_headers(admin.id, Role.ADMIN))

        assert response.status_code == 403


class TestAdminReview:
    async def test_review_queue(self, client, factory):
        admin = await factory.admin()
        pending = await factory.company(status=CompanyStatus.PENDING)
        await factory.company(status=CompanyStatus.APPROVED)

        response = await client.get(
            "/api/v1/admin/companies/review",
            params={"status": "pending", "page": 1, "size": 5},
            headers=auth_headers(admin.id, Role.ADMIN),
        )

        assert response.status_code == 200
        body = response.json()["data"]
        assert [c["id"] for c in body["data"]] == [str(pending.id)]
        assert body["pagination"] == {"total": 1, "page": 1, "size": 5, "totalPages": 1}

    async def test_page_size_is_capped(self, client, factory):
        admin = await factory.admin()

        response = await client.get(
            "/api/v1/admin/companies/review",
            params={"size": 10000},
            headers=auth_headers(admin.id, Role.ADMIN),
        )

        assert response.json()["data"]["pagination"]["size"] == 100

    async def test_get_company(self, client, factory):
        admin = await factory.admin()
        company = await factory.company(status=CompanyStatus.APPROVED)

        response = await client.get(f"/api/v1/admin/company/{company.id}", headers=auth_headers(admin.id, Role.ADMIN))

        assert response.status_code == 200
        assert response.json()["data"]["email"] == company.email

    async def test_approve(self, client, factory):
        admin = await factory.admin()
        company = await factory.company(status=CompanyStatus.PENDING)

        response = await client.patch(
            f"/api/v1/admin/company/{company.id}/change-status",
            json={"status": CompanyStatus.APPROVED.value},
            headers=auth_headers(admin.id, Role.ADMIN),
        )

        assert response.status_code == 200
        assert response.json()["data"]["status"] == CompanyStatus.APPROVED.value
        assert (await factory.reload(Company, company.id)).status == CompanyStatus.APPROVED.value

    async def test_reject_without_reason(self, client, factory):
        admin = await factory.admin()
        company = await factory.company(status=CompanyStatus.PENDING)

        response = await client.patch(
            f"/api/v1/admin/company/{company.id}/change-status",
            json={"status": CompanyStatus.REJECTED.value, "reasonReject": ""},
            headers=auth_headers(admin.id, Role.ADMIN),
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "REASON_REJECT_REQUIRED"
        assert (await factory.reload(Company, company.id)).status == CompanyStatus.PENDING.value

    async def test_already_reviewed(self, client, factory):
        admin = await factory.admin()
        company = await factory.company(status=CompanyStatus.APPROVED)

        response = await client.patch(
            f"/api/v1/admin/company/{company.id}/change-status",
            json={"status": CompanyStatus.REJECTED.value, "reasonReject": "Changed my mind"},
            headers=auth_headers(admin.id, Role.ADMIN),
        )

        assert response.status_code == 404
        assert (await factory.reload(Company, company.id)).status == CompanyStatus.APPROVED.value

    async def test_company_cannot_review(self, client, factory):
        company = await factory.company()

        response = await client.get("/api/v1/admin/companies/review", headers=auth_headers(company.account_id, Role.COMPANY))

        assert response.status_code == 403

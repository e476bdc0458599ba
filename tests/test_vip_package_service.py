"""Tests for VipPackageService (catalog CRUD and active-order guard)."""

from datetime import timedelta
from decimal import Decimal
from uuid import uuid4

import pytest
from pydantic import ValidationError as PydanticValidationError

from jobboard.core.constants import ErrorCode, VipPackageLevel
from jobboard.core.exceptions import ConflictError, NotFoundError, ValidationError
from jobboard.models import VipPackage
from jobboard.schemas.vip_package import VipPackageIn
from jobboard.services.vip_package_service import VipPackageService
from jobboard.utils.dates import utc_now


def package_in(**overrides) -> VipPackageIn:
    data = {
        "name": "Gold 30 days",
        "description": "Ten featured job posts for a month",
        "numPost": 10,
        "price": "1500000",
        "durationDay": 30,
        "priority": "GOLD",
    }
    data.update(overrides)
    return VipPackageIn.model_validate(data)


@pytest.fixture
def service(session) -> VipPackageService:
    return VipPackageService(session)


class TestPackageInput:
    def test_priority_label_maps_to_rank(self):
        assert package_in(priority="platinum").priority is VipPackageLevel.PLATINUM

    @pytest.mark.parametrize(
        "field,value",
        [
            ("name", "ab"),
            ("description", "too short"),
            ("numPost", 0),
            ("price", "999"),
            ("durationDay", 0),
            ("priority", "BRONZE"),
            ("priority", 2),
        ],
    )
    def test_rejects_invalid_fields(self, field, value):
        with pytest.raises(PydanticValidationError):
            package_in(**{field: value})


class TestCatalog:
    async def test_create_stores_rank(self, service):
        package = await service.create(package_in())

        assert package.priority == VipPackageLevel.GOLD.value
        assert package.level == "GOLD"
        assert package.price == Decimal("1500000")
        assert package.is_deleted is False

    async def test_get_hides_deleted(self, service, factory):
        package = await factory.package(is_deleted=True)

        with pytest.raises(NotFoundError):
            await service.get(package.id)

    async def test_update_without_orders(self, service, factory):
        package = await factory.package()

        updated = await service.update(package.id, package_in(name="Gold renamed", priority="DIAMOND"))

        assert updated.name == "Gold renamed"
        assert updated.priority == VipPackageLevel.DIAMOND.value

    async def test_update_missing_package(self, service):
        with pytest.raises(NotFoundError):
            await service.update(uuid4(), package_in())

    async def test_update_with_active_order_is_refused(self, service, factory):
        package = await factory.package()
        company = await factory.company()
        await factory.order(company, package, end_date=utc_now() + timedelta(days=1))

        with pytest.raises(ConflictError) as exc:
            await service.update(package.id, package_in(name="Changed"))

        assert exc.value.error_code == ErrorCode.CANNOT_UPDATE_ACTIVE_PACKAGE
        assert exc.value.status_code == 400
        assert (await factory.reload(VipPackage, package.id)).name == package.name

    async def test_expired_orders_do_not_block_update(self, service, factory):
        package = await factory.package()
        company = await factory.company()
        await factory.order(company, package, end_date=utc_now() - timedelta(days=1))

        updated = await service.update(package.id, package_in(name="Changed"))

        assert updated.name == "Changed"

    async def test_delete_is_soft(self, service, factory):
        package = await factory.package()

        await service.delete(package.id)

        reloaded = await factory.reload(VipPackage, package.id)
        assert reloaded is not None
        assert reloaded.is_deleted is True

    async def test_delete_with_active_order_is_refused(self, service, factory):
        package = await factory.package()
        company = await factory.company()
        await factory.order(company, package)

        with pytest.raises(ConflictError):
            await service.delete(package.id)

        assert (await factory.reload(VipPackage, package.id)).is_deleted is False


class TestListing:
    async def test_admin_listing_filters(self, service, factory):
        gold = await factory.package(priority=VipPackageLevel.GOLD, name="Gold Plus")
        await factory.package(priority=VipPackageLevel.BASIC, name="Basic")
        await factory.package(priority=VipPackageLevel.GOLD, name="Gold hidden", is_deleted=True)

        by_priority, total = await service.list_packages(1, 10, priority="gold")
        by_search, _ = await service.list_packages(1, 10, search="PLUS")

        assert total == 1
        assert [p.id for p in by_priority] == [gold.id]
        assert [p.id for p in by_search] == [gold.id]

    async def test_invalid_priority_filter(self, service):
        with pytest.raises(ValidationError) as exc:
            await service.list_packages(1, 10, priority="BRONZE")
        assert exc.value.errors[0]["field"] == "priority"

    async def test_company_listing_is_cheapest_first(self, service, factory):
        pricey = await factory.package(price=Decimal("900000"))
        cheap = await factory.package(price=Decimal("100000"))
        await factory.package(price=Decimal("1000"), is_deleted=True)

        packages = await service.list_for_company()

        assert [p.id for p in packages] == [cheap.id, pricey.id]

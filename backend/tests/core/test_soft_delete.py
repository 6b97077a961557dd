"""
Tests for soft delete infrastructure.

Ledger rows are flagged rather than removed; default managers hide flagged
rows while all_objects keeps them visible for uniqueness checks and admin.
"""

import pytest

from apps.billing.models import SubscriptionPlan
from apps.organizations.models import Organization
from tests.accounts.factories import OrganizationFactory
from tests.billing.factories import SubscriptionPlanFactory


@pytest.mark.django_db
class TestSoftDeleteMixin:
    def test_not_deleted_by_default(self) -> None:
        org = OrganizationFactory()

        assert org.is_deleted is False
        assert org.deleted_at is None

    def test_soft_delete_hides_row(self) -> None:
        org = OrganizationFactory()

        org.soft_delete()

        org.refresh_from_db()
        assert org.is_deleted is True
        assert not Organization.objects.filter(pk=org.pk).exists()
        assert Organization.all_objects.filter(pk=org.pk).exists()

    def test_soft_delete_touches_updated_at(self) -> None:
        org = OrganizationFactory()
        updated_at = org.updated_at

        org.soft_delete()

        org.refresh_from_db()
        assert org.updated_at >= updated_at
        assert org.updated_at >= org.deleted_at


@pytest.mark.django_db
class TestSoftDeleteQuerySet:
    def test_bulk_delete_flags_rows(self) -> None:
        plans = SubscriptionPlanFactory.create_batch(3)
        org_ids = [p.organization_id for p in plans]

        count, _ = SubscriptionPlan.objects.filter(organization_id__in=org_ids[:2]).delete()

        assert count == 2
        assert SubscriptionPlan.objects.count() == 1
        assert SubscriptionPlan.all_objects.filter(deleted_at__isnull=False).count() == 2
        assert SubscriptionPlan.all_objects.count() == 3

    def test_deleting_all_rows_keeps_them_in_storage(self) -> None:
        OrganizationFactory.create_batch(2)

        count, _ = Organization.objects.all().delete()

        assert count == 2
        assert Organization.objects.count() == 0
        assert Organization.all_objects.count() == 2

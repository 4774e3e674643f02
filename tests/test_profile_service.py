"""Tests for customer profile reconciliation."""

from decimal import Decimal

import pytest
from sqlalchemy import select

from storefront.data.models.address import AddressModel
from storefront.data.models.customer import CustomerModel
from storefront.domain.loyalty import Tier, tier_for
from storefront.services.profile_service import ProfileService


def customers(db):
    return db.execute(select(CustomerModel)).scalars().all()


def addresses(db, user_id):
    return db.execute(select(AddressModel).where(AddressModel.user_id == user_id)).scalars().all()


class TestReconcile:
    def test_new_guest_customer(self, db, make_order):
        order = make_order(phone="0700111222", total="10000")

        customer = ProfileService(db).reconcile(order)

        assert customer.total_spent == Decimal("10000")
        assert customer.loyalty_points == 100
        assert tier_for(customer.loyalty_points) == Tier.BRONZE

    def test_existing_customer_crosses_into_gold(self, db, make_order):
        svc = ProfileService(db)
        for total in ("20000", "25000"):
            svc.reconcile(make_order(phone="0711000000", total=total))

        [customer] = customers(db)
        assert customer.total_spent == Decimal("45000")
        assert customer.loyalty_points == 450
        assert tier_for(customer.loyalty_points) == Tier.SILVER

        svc.reconcile(make_order(phone="0711000000", total="10000"))

        db.refresh(customer)
        assert customer.total_spent == Decimal("55000")
        assert customer.loyalty_points == 550
        assert tier_for(customer.loyalty_points) == Tier.GOLD

    def test_reconcile_is_idempotent(self, db, make_order):
        svc = ProfileService(db)
        make_order(phone="0722000000", total="1500")
        order = make_order(phone="0722000000", total="2600")

        first = svc.reconcile(order)
        spent, points = first.total_spent, first.loyalty_points
        second = svc.reconcile(order)

        assert len(customers(db)) == 1
        assert second.total_spent == spent == Decimal("4100")
        assert second.loyalty_points == points == 41

    def test_latest_name_and_email_win(self, db, make_order):
        svc = ProfileService(db)
        svc.reconcile(make_order(full_name="J. Wanjiru", email="old@example.com"))
        svc.reconcile(make_order(full_name="Jane Wanjiru", email="jane@example.com"))

        [customer] = customers(db)
        assert customer.full_name == "Jane Wanjiru"
        assert customer.email == "jane@example.com"

    def test_account_orders_keyed_by_user_id(self, db, make_order):
        svc = ProfileService(db)
        svc.reconcile(make_order(user_id="user-1", phone="0700000001", total="300"))
        svc.reconcile(make_order(user_id="user-1", phone="0700000002", total="700"))

        [customer] = customers(db)
        assert customer.user_id == "user-1"
        assert customer.total_spent == Decimal("1000")
        assert customer.loyalty_points == 10

    def test_admin_adjusted_points_reset_on_next_reconcile(self, db, make_order):
        svc = ProfileService(db)
        order = make_order(total="10000")
        customer = svc.reconcile(order)
        customer.loyalty_points = 999
        db.commit()

        assert svc.reconcile(order).loyalty_points == 100

    def test_guest_spend_excludes_account_orders_on_same_phone(self, db, make_order):
        svc = ProfileService(db)
        account = svc.reconcile(make_order(user_id="user-1", phone="0700111222", total="10000"))
        guest = svc.reconcile(make_order(phone="0700111222", total="1000"))

        assert guest.id != account.id
        assert guest.total_spent == Decimal("1000")
        assert guest.loyalty_points == 10

        db.refresh(account)
        assert account.total_spent == Decimal("10000")
        assert account.loyalty_points == 100

    def test_failed_lookup_rolls_back(self, db, make_order, monkeypatch):
        svc = ProfileService(db)
        order = make_order()
        rollbacks = []

        def unavailable(phone):
            raise RuntimeError("database unavailable")

        monkeypatch.setattr(svc.customers, "get_by_phone", unavailable)
        monkeypatch.setattr(svc.customers, "rollback", lambda: rollbacks.append(True))

        with pytest.raises(RuntimeError):
            svc.reconcile(order)
        assert rollbacks == [True]


class TestReaggregation:
    def test_identity_drops_to_remaining_orders(self, db, make_order):
        svc = ProfileService(db)
        svc.reconcile(make_order(phone="0755000000", total="20000"))
        dropped = make_order(phone="0755000000", total="30000")
        svc.reconcile(dropped)
        db.delete(dropped)
        db.commit()

        customer = svc.reconcile_identity(None, "0755000000")

        assert customer.total_spent == Decimal("20000")
        assert customer.loyalty_points == 200

    def test_unknown_identity_creates_nothing(self, db):
        assert ProfileService(db).reconcile_identity("user-404", "0700000000") is None
        assert customers(db) == []

    def test_reset_all_totals(self, db, make_order):
        svc = ProfileService(db)
        svc.reconcile(make_order(phone="0700000001", total="5000"))
        svc.reconcile(make_order(user_id="user-1", total="7000"))

        assert svc.reset_all_totals() == 2
        assert {(c.total_spent, c.loyalty_points) for c in customers(db)} == {(Decimal("0"), 0)}


class TestAddressBookkeeping:
    def test_first_checkout_address_is_default(self, db, make_order):
        ProfileService(db).reconcile(make_order(user_id="user-1", address="Westlands"))

        [address] = addresses(db, "user-1")
        assert address.is_default is True

    def test_same_address_not_duplicated(self, db, make_order):
        svc = ProfileService(db)
        svc.reconcile(make_order(user_id="user-1", address="Westlands"))
        svc.reconcile(make_order(user_id="user-1", address="Westlands"))

        assert len(addresses(db, "user-1")) == 1

    def test_new_address_is_not_default(self, db, make_order):
        svc = ProfileService(db)
        svc.reconcile(make_order(user_id="user-1", address="Westlands"))
        svc.reconcile(make_order(user_id="user-1", address="Eastleigh"))

        defaults = {a.address: a.is_default for a in addresses(db, "user-1")}
        assert defaults == {"Westlands": True, "Eastleigh": False}

    def test_guest_orders_store_no_address(self, db, make_order):
        ProfileService(db).reconcile(make_order(address="Westlands"))

        assert db.execute(select(AddressModel)).scalars().all() == []


class TestAccountProfile:
    def test_ensure_account_customer_once(self, db):
        svc = ProfileService(db)
        first = svc.ensure_account_customer("user-9", "Amina", email="amina@example.com")
        second = svc.ensure_account_customer("user-9", "Someone Else")

        assert first.id == second.id
        assert second.full_name == "Amina"
        assert second.loyalty_points == 0

    def test_profile_without_customer_is_bronze(self, db):
        profile = ProfileService(db).get_profile("nobody")

        assert profile.customer is None
        assert profile.loyalty.tier == Tier.BRONZE
        assert profile.loyalty.next_threshold == 200

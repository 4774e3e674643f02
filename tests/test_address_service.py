"""Tests for AddressService."""

import random

import pytest

from storefront.domain.errors import NotFoundError
from storefront.services.address_service import AddressService


def defaults(svc, user_id):
    return [a for a in svc.list_addresses(user_id) if a.is_default]


class TestAddressBook:
    def test_first_address_is_default(self, db):
        svc = AddressService(db)
        first = svc.add_address("user-1", "Westlands")
        second = svc.add_address("user-1", "Eastleigh", label="Work")

        assert first.is_default is True
        assert second.is_default is False

    def test_add_as_default_clears_previous(self, db):
        svc = AddressService(db)
        svc.add_address("user-1", "Westlands")
        new = svc.add_address("user-1", "Eastleigh", make_default=True)

        [default] = defaults(svc, "user-1")
        assert default.id == new.id

    def test_set_default(self, db):
        svc = AddressService(db)
        svc.add_address("user-1", "Westlands")
        other = svc.add_address("user-1", "Eastleigh")

        svc.set_default("user-1", other.id)

        [default] = defaults(svc, "user-1")
        assert default.id == other.id
        assert svc.list_addresses("user-1")[0].id == other.id

    def test_defaults_are_per_user(self, db):
        svc = AddressService(db)
        svc.add_address("user-1", "Westlands")
        svc.add_address("user-2", "Pangani")

        assert len(defaults(svc, "user-1")) == 1
        assert len(defaults(svc, "user-2")) == 1

    def test_deleting_default_promotes_another(self, db):
        svc = AddressService(db)
        first = svc.add_address("user-1", "Westlands")
        svc.add_address("user-1", "Eastleigh")

        svc.delete_address("user-1", first.id)

        [remaining] = svc.list_addresses("user-1")
        assert remaining.address == "Eastleigh"
        assert remaining.is_default is True

    def test_deleting_last_address(self, db):
        svc = AddressService(db)
        only = svc.add_address("user-1", "Westlands")
        svc.delete_address("user-1", only.id)

        assert svc.list_addresses("user-1") == []

    def test_other_users_address_is_forbidden(self, db):
        svc = AddressService(db)
        address = svc.add_address("user-1", "Westlands")

        with pytest.raises(PermissionError):
            svc.set_default("user-2", address.id)
        with pytest.raises(PermissionError):
            svc.delete_address("user-2", address.id)

    def test_missing_address(self, db):
        with pytest.raises(NotFoundError):
            AddressService(db).set_default("user-1", "nope")

    def test_blank_address_rejected(self, db):
        with pytest.raises(ValueError):
            AddressService(db).add_address("user-1", "  ")

    def test_single_default_under_random_operations(self, db):
        rng = random.Random(7)
        svc = AddressService(db)

        for i in range(60):
            current = svc.list_addresses("user-1")
            op = rng.choice(["add", "add_default", "set", "delete"])
            if op == "add" or not current:
                svc.add_address("user-1", f"Street {i}")
            elif op == "add_default":
                svc.add_address("user-1", f"Street {i}", make_default=True)
            elif op == "set":
                svc.set_default("user-1", rng.choice(current).id)
            else:
                svc.delete_address("user-1", rng.choice(current).id)

            count = len(defaults(svc, "user-1"))
            if svc.list_addresses("user-1"):
                assert count == 1
            else:
                assert count == 0

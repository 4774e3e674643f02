# storefront/services/address_service.py
from sqlalchemy.orm import Session

from storefront.data.models.address import AddressModel
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import AddressOut
from storefront.repos.address_repo import AddressRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CHECKOUT_ADDRESS_LABEL = "Delivery"


class AddressService:
    """
    Address book of an account. At most one default per user, and never
    zero defaults while the user has any address.
    """

    def __init__(self, db: Session):
        self.repo = AddressRepo(db)

    def list_addresses(self, user_id: str) -> list[AddressOut]:
        return [AddressOut.model_validate(a) for a in self.repo.list_for_user(user_id)]

    def add_address(
        self,
        user_id: str,
        address: str,
        label: str = "Home",
        make_default: bool = False,
        commit: bool = True,
    ) -> AddressModel:
        address = address.strip()
        if not address:
            raise ValueError("Address cannot be empty")

        #first address of a user is the default one
        first = self.repo.count_for_user(user_id) == 0
        created = self.repo.add(
            AddressModel(user_id=user_id, label=label, address=address, is_default=first)
        )

        if make_default and not first:
            self._make_default(user_id, created)

        if commit:
            self.repo.commit()

        logger.info(f"Address {created.id} added for user {user_id} (default={created.is_default})")
        return created

    def save_from_checkout(self, user_id: str, address: str, commit: bool = True) -> AddressModel | None:
        """Remember a delivery address used at checkout unless the user already has it."""
        address = address.strip()
        if not address or self.repo.find_by_text(user_id, address):
            return None
        return self.add_address(user_id, address, label=CHECKOUT_ADDRESS_LABEL, commit=commit)

    def set_default(self, user_id: str, address_id: str) -> AddressModel:
        target = self._owned(user_id, address_id)
        self._make_default(user_id, target)
        self.repo.commit()
        logger.info(f"Address {address_id} is now default for user {user_id}")
        return target

    def delete_address(self, user_id: str, address_id: str) -> None:
        target = self._owned(user_id, address_id)
        was_default = target.is_default

        self.repo.delete(target)

        if was_default:
            successor = self.repo.oldest_for_user(user_id)
            if successor:
                successor.is_default = True
                logger.info(f"Address {successor.id} promoted to default for user {user_id}")

        self.repo.commit()
        logger.info(f"Address {address_id} deleted for user {user_id}")

    def _owned(self, user_id: str, address_id: str) -> AddressModel:
        address = self.repo.get(address_id)
        if not address:
            raise NotFoundError("Address not found")
        if address.user_id != user_id:
            raise PermissionError("No access to this address")
        return address

    def _make_default(self, user_id: str, address: AddressModel) -> None:
        # clear then set, both inside the caller's transaction
        self.repo.clear_default(user_id)
        address.is_default = True

# storefront/repos/address_repo.py
from sqlalchemy import select, func, update
from sqlalchemy.orm import Session

from storefront.data.models.address import AddressModel


class AddressRepo:
    def __init__(self, db: Session):
        self.db = db

    def get(self, address_id: str) -> AddressModel | None:
        return self.db.get(AddressModel, address_id)

    def list_for_user(self, user_id: str) -> list[AddressModel]:
        stmt = (
            select(AddressModel)
            .where(AddressModel.user_id == user_id)
            .order_by(AddressModel.is_default.desc(), AddressModel.created_at)
        )
        return list(self.db.execute(stmt).scalars().all())

    def count_for_user(self, user_id: str) -> int:
        stmt = select(func.count(AddressModel.id)).where(AddressModel.user_id == user_id)
        return self.db.execute(stmt).scalar_one()

    def find_by_text(self, user_id: str, address: str) -> AddressModel | None:
        stmt = (
            select(AddressModel)
            .where(AddressModel.user_id == user_id, AddressModel.address == address)
            .limit(1)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def oldest_for_user(self, user_id: str) -> AddressModel | None:
        stmt = (
            select(AddressModel)
            .where(AddressModel.user_id == user_id)
            .order_by(AddressModel.created_at)
            .limit(1)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def clear_default(self, user_id: str) -> None:
        self.db.execute(
            update(AddressModel)
            .where(AddressModel.user_id == user_id)
            .values(is_default=False)
        )

    def add(self, address: AddressModel) -> AddressModel:
        self.db.add(address)
        self.db.flush()
        return address

    def delete(self, address: AddressModel) -> None:
        self.db.delete(address)
        self.db.flush()

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

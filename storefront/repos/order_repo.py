# storefront/repos/order_repo.py
from datetime import datetime
from decimal import Decimal

from sqlalchemy import select, func, delete
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_with_items(self, order: OrderModel, items: list[OrderItemModel]) -> OrderModel:
        # order and its items go out in one transaction, a failure leaves neither behind
        order.items = items
        self.db.add(order)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(order)
        return order

    def get_order(self, order_id: str) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def list_orders(self, status: str | None = None) -> list[OrderModel]:
        stmt = select(OrderModel)
        if status:
            stmt = stmt.where(OrderModel.status == status)
        stmt = stmt.order_by(OrderModel.created_at.desc())
        return list(self.db.execute(stmt).scalars().all())

    def list_by_user(self, user_id: str) -> list[OrderModel]:
        stmt = (
            select(OrderModel)
            .where(OrderModel.user_id == user_id)
            .order_by(OrderModel.created_at.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def list_by_phone(self, phone: str) -> list[OrderModel]:
        stmt = (
            select(OrderModel)
            .where(OrderModel.phone == phone)
            .order_by(OrderModel.created_at.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def sum_total_for_user(self, user_id: str) -> Decimal:
        return self._sum_total(OrderModel.user_id == user_id)

    def sum_total_for_phone(self, phone: str) -> Decimal:
        # guest spend only, account orders sharing the phone belong to the account
        return self._sum_total(OrderModel.phone == phone, OrderModel.user_id.is_(None))

    def _sum_total(self, *conditions) -> Decimal:
        stmt = select(func.coalesce(func.sum(OrderModel.total_amount), 0)).where(*conditions)
        total = self.db.execute(stmt).scalar_one()
        return Decimal(str(total))

    def find_orphans(self, created_before: datetime) -> list[OrderModel]:
        has_items = select(OrderItemModel.id).where(OrderItemModel.order_id == OrderModel.id).exists()
        stmt = select(OrderModel).where(
            OrderModel.created_at < created_before,
            OrderModel.status != "cancelled",
            ~has_items,
        )
        return list(self.db.execute(stmt).scalars().all())

    def count(self) -> int:
        return self.db.execute(select(func.count(OrderModel.id))).scalar_one()

    def save(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        return order

    def delete_order(self, order: OrderModel) -> None:
        self.db.delete(order)
        self.db.commit()

    def delete_all(self) -> int:
        # bulk delete skips ORM cascades, so items first
        self.db.execute(delete(OrderItemModel))
        result = self.db.execute(delete(OrderModel))
        self.db.commit()
        return result.rowcount

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

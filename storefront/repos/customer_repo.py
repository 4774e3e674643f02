# storefront/repos/customer_repo.py
from sqlalchemy import select, or_, update
from sqlalchemy.orm import Session

from storefront.data.models.customer import CustomerModel


class CustomerRepo:
    def __init__(self, db: Session):
        self.db = db

    def get(self, customer_id: str) -> CustomerModel | None:
        return self.db.get(CustomerModel, customer_id)

    def get_by_user_id(self, user_id: str) -> CustomerModel | None:
        stmt = select(CustomerModel).where(CustomerModel.user_id == user_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_phone(self, phone: str) -> CustomerModel | None:
        # phone is the natural key of guest customers only, oldest row wins
        stmt = (
            select(CustomerModel)
            .where(CustomerModel.phone == phone, CustomerModel.user_id.is_(None))
            .order_by(CustomerModel.created_at)
            .limit(1)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def list_customers(self, search: str | None = None) -> list[CustomerModel]:
        stmt = select(CustomerModel)
        if search:
            pattern = f"%{search.lower()}%"
            stmt = stmt.where(
                or_(
                    CustomerModel.full_name.ilike(pattern),
                    CustomerModel.phone.ilike(pattern),
                    CustomerModel.email.ilike(pattern),
                )
            )
        stmt = stmt.order_by(CustomerModel.total_spent.desc())
        return list(self.db.execute(stmt).scalars().all())

    def add(self, customer: CustomerModel) -> CustomerModel:
        self.db.add(customer)
        return customer

    def save(self, customer: CustomerModel) -> CustomerModel:
        self.db.add(customer)
        self.db.commit()
        self.db.refresh(customer)
        return customer

    def reset_all_totals(self) -> int:
        result = self.db.execute(update(CustomerModel).values(total_spent=0, loyalty_points=0))
        return result.rowcount

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

# sales_api/models.py
from sqlalchemy import Boolean, Column, DateTime, Index, Integer, Numeric, String, Text

from .database import Base

class Transaction(Base):
    """One listed or sold product, as delivered by the upstream dataset."""

    __tablename__ = "transactions"

    # ids come from the dataset, never generated locally
    id = Column(Integer, primary_key=True, autoincrement=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    category = Column(String(100), nullable=False)
    image = Column(String(255), nullable=False)
    sold = Column(Boolean, nullable=False)
    date_of_sale = Column(DateTime, nullable=False)

    __table_args__ = (
        Index("idx_date_of_sale", "date_of_sale"),
    )

    def __repr__(self):
        return f"<Transaction id={self.id} category={self.category!r} price={self.price}>"

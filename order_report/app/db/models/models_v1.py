from __future__ import annotations

from decimal import Decimal

from sqlalchemy import (
    String,
    Integer,
    ForeignKey,
    Numeric,
    CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from order_report.app.db.base import Base

# ---------- MASTER DATA ----------
class Customer(Base):
    __tablename__ = "customers"
    customer_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255))


class Product(Base):
    __tablename__ = "products"
    sku: Mapped[str] = mapped_column(String(64), primary_key=True)
    product_name: Mapped[str | None] = mapped_column(String(255))
    # TTC, prix tel que fourni (ex. 0.125) : le chargement refuse plus de 6 décimales
    unit_price: Mapped[Decimal] = mapped_column(Numeric(18, 6), nullable=False)
    # pas d'Enum SQL : un code inconnu doit remonter au calcul, pas au chargement
    vat_code: Mapped[str] = mapped_column(String(32), nullable=False)

    __table_args__ = (CheckConstraint("unit_price >= 0", name="ck_product_unit_price_nonneg"),)


# ---------- INVENTORY ----------
class StockLevel(Base):
    __tablename__ = "stock_levels"
    sku: Mapped[str] = mapped_column(ForeignKey("products.sku", ondelete="RESTRICT"), primary_key=True)
    qty_on_hand: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


# ---------- SALES ----------
class Order(Base):
    __tablename__ = "orders"
    order_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    customer_id: Mapped[str] = mapped_column(ForeignKey("customers.customer_id", ondelete="RESTRICT"), nullable=False)
    order_date: Mapped[str | None] = mapped_column(String(32))


class OrderLine(Base):
    __tablename__ = "order_lines"
    order_id: Mapped[str] = mapped_column(ForeignKey("orders.order_id", ondelete="CASCADE"), primary_key=True)
    sku: Mapped[str] = mapped_column(ForeignKey("products.sku", ondelete="RESTRICT"), primary_key=True)
    qty: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (CheckConstraint("qty > 0", name="ck_order_line_qty_pos"),)


# Ordre de chargement (respecte les FK)
LOAD_ORDER: tuple[type[Base], ...] = (Customer, Product, StockLevel, Order, OrderLine)

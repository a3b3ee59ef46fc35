from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from order_report.app.db.models.models_v1 import (
    Customer,
    Order,
    OrderLine,
    Product,
    StockLevel,
)
from order_report.services.aggregation import OrderBatch, OrderHeader
from order_report.services.valuation import OrderLineRow


def query_orders(db: Session) -> list[OrderHeader]:
    """
    Commandes + nom client, order_id ASC.
    Jointure interne : une commande sans client connu n'apparaît pas.
    """
    rows = db.execute(
        select(Order.order_id, Customer.customer_name)
        .join(Customer, Customer.customer_id == Order.customer_id)
        .order_by(Order.order_id.asc())
    ).all()

    return [OrderHeader(order_id=oid, customer_name=name) for oid, name in rows]


def query_order_lines(db: Session, order_id: str) -> list[OrderLineRow]:
    """
    Lignes d'une commande jointes au produit et au stock, sku ASC.

    L'ordre sku ASC fixe l'ordre de sommation -> arrondis reproductibles.
    Jointures internes : une ligne sans produit ou sans stock est ignorée.
    """
    rows = db.execute(
        select(
            OrderLine.sku,
            OrderLine.qty,
            Product.unit_price,
            Product.vat_code,
            StockLevel.qty_on_hand,
        )
        .join(Product, Product.sku == OrderLine.sku)
        .join(StockLevel, StockLevel.sku == OrderLine.sku)
        .where(OrderLine.order_id == order_id)
        .order_by(OrderLine.sku.asc())
    ).all()

    return [
        OrderLineRow(
            sku=sku,
            qty=int(qty),
            unit_price=unit_price,
            vat_code=vat_code,
            qty_on_hand=int(qty_on_hand),
        )
        for sku, qty, unit_price, vat_code, qty_on_hand in rows
    ]


def fetch_order_batches(db: Session) -> list[OrderBatch]:
    # I/O séquentielle sur la session ; le calcul parallèle vient après
    return [
        OrderBatch(header=header, lines=query_order_lines(db, header.order_id))
        for header in query_orders(db)
    ]

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Sequence

from order_report.app.db.models.core_types import ErrorPolicy
from order_report.services.errors import OrderAggregationError, OrderReportError
from order_report.services.rates import RateTable
from order_report.services.valuation import LineValuation, OrderLineRow, value_line

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class OrderHeader:
    order_id: str
    customer_name: str


@dataclass(frozen=True)
class OrderSummary:
    order_id: str
    customer_name: str
    net_total: Decimal
    vat_total: Decimal
    gross_total: Decimal
    is_fully_in_stock: bool


@dataclass(frozen=True)
class OrderBatch:
    """Une commande et toutes ses lignes (triées par sku)."""
    header: OrderHeader
    lines: Sequence[OrderLineRow]


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def aggregate_order(
    order_id: str,
    customer_name: str,
    valuations: Iterable[LineValuation],
) -> OrderSummary:
    """
    Totalise les lignes d'une commande.

    Règle métier :
        gross_total = round(SUM(gross_value), 2)
        net_total   = round(SUM(net_value), 2)
        vat_total   = gross_total - net_total   (sur les valeurs ARRONDIES)
        is_fully_in_stock = AND(sufficient)     (True si aucune ligne)

    vat_total peut donc différer d'un centime de round(SUM(vat_value), 2) :
    c'est attendu, net + vat == gross dans le rapport.
    """
    gross_total = Decimal(0)
    net_total = Decimal(0)
    in_stock = True

    # ordre de sommation = ordre des lignes (sku ASC)
    for v in valuations:
        gross_total += v.gross_value
        net_total += v.net_value
        in_stock = in_stock and v.sufficient

    gross_total = round_money(gross_total)
    net_total = round_money(net_total)

    return OrderSummary(
        order_id=order_id,
        customer_name=customer_name,
        net_total=net_total,
        vat_total=gross_total - net_total,
        gross_total=gross_total,
        is_fully_in_stock=in_stock,
    )


def summarize_order(
    header: OrderHeader,
    lines: Sequence[OrderLineRow],
    rates: RateTable,
) -> OrderSummary:
    # tout ou rien : une ligne invalide invalide la commande entière
    try:
        valuations = [value_line(line, rates) for line in lines]
    except OrderReportError as e:
        raise OrderAggregationError(header.order_id, e) from e

    return aggregate_order(header.order_id, header.customer_name, valuations)


def summarize_orders(
    batches: Sequence[OrderBatch],
    rates: RateTable,
    *,
    policy: ErrorPolicy = ErrorPolicy.abort,
    max_workers: int = 4,
) -> list[OrderSummary]:
    """
    Calcule le résumé de chaque commande en parallèle.

    Propriétés :
    - résultat dans l'ordre d'entrée, quel que soit l'ordre de fin des tâches
    - abort : la première commande en échec (ordre d'entrée) interrompt tout
    - skip : chaque commande en échec est loggée en WARNING puis ignorée
    """
    if not batches:
        return []

    summaries: list[OrderSummary] = []

    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="order-agg") as pool:
        futures = [pool.submit(summarize_order, b.header, b.lines, rates) for b in batches]

        for future in futures:
            try:
                summaries.append(future.result())
            except OrderAggregationError as e:
                if policy is ErrorPolicy.abort:
                    for pending in futures:
                        pending.cancel()
                    raise
                logger.warning("Skipping order %s: %s", e.order_id, e.cause)

    return summaries

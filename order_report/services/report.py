from __future__ import annotations

import logging
from decimal import Decimal
from pathlib import Path
from typing import Iterable, Sequence

import pandas as pd

from order_report.app.schemas.report_row import ReportRow
from order_report.services.aggregation import OrderSummary

logger = logging.getLogger(__name__)

REPORT_COLUMNS = [
    "order_id",
    "customer_name",
    "net_total",
    "vat_total",
    "gross_total",
    "is_fully_in_stock",
]


def format_money(value: Decimal) -> str:
    return f"{value:.2f}"


def build_report(summaries: Iterable[OrderSummary]) -> list[ReportRow]:
    # projection seulement, aucun recalcul ; l'ordre d'entrée est conservé
    return [
        ReportRow(
            order_id=s.order_id,
            customer_name=s.customer_name,
            net_total=format_money(s.net_total),
            vat_total=format_money(s.vat_total),
            gross_total=format_money(s.gross_total),
            is_fully_in_stock=s.is_fully_in_stock,
        )
        for s in summaries
    ]


def emit_report(rows: Sequence[ReportRow], path: str | Path) -> Path:
    """
    Écrit le rapport CSV (en-tête toujours présent, même sans commande).
    Les booléens sont écrits en minuscules : true / false.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    df = pd.DataFrame([r.model_dump() for r in rows], columns=REPORT_COLUMNS)
    df["is_fully_in_stock"] = df["is_fully_in_stock"].map({True: "true", False: "false"})
    df.to_csv(path, index=False)

    logger.info("Report written to %s (%d orders)", path, len(df))
    return path

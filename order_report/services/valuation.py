from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from order_report.services.rates import RateTable


@dataclass(frozen=True)
class OrderLineRow:
    """Ligne jointe order_lines + products + stock_levels."""
    sku: str
    qty: int
    unit_price: Decimal  # TTC
    vat_code: str
    qty_on_hand: int


@dataclass(frozen=True)
class LineValuation:
    gross_value: Decimal
    net_value: Decimal
    vat_value: Decimal
    sufficient: bool


def value_line(line: OrderLineRow, rates: RateTable) -> LineValuation:
    """
    Valorise une ligne (pleine précision, aucun arrondi ici).

    Règle métier :
        gross = unit_price * qty
        net   = gross / (1 + taux[vat_code])
        vat   = gross - net          (jamais arrondi séparément)
        sufficient = qty < qty_on_hand

    Lève UnknownVatCode si le code n'est pas dans la table.
    """
    rate = rates.rate(line.vat_code)

    gross = Decimal(line.unit_price) * line.qty
    net = gross / (1 + rate)

    return LineValuation(
        gross_value=gross,
        net_value=net,
        vat_value=gross - net,
        # stock égal à la quantité = insuffisant (comportement historique)
        sufficient=line.qty < line.qty_on_hand,
    )

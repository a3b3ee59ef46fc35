"""
Exceptions du calcul de rapport.

Hiérarchie :
    OrderReportError
    ├── ConfigLoadError        (fatal, avant tout calcul)
    ├── SourceLoadError        (fatal, chargement CSV)
    ├── UnknownVatCode         (ligne -> remonte en OrderAggregationError)
    └── OrderAggregationError  (une commande, traitée selon ErrorPolicy)
"""

from __future__ import annotations


class OrderReportError(Exception):
    pass


class ConfigLoadError(OrderReportError):
    pass


class SourceLoadError(OrderReportError):
    def __init__(self, table: str, detail: str):
        self.table = table
        self.detail = detail
        super().__init__(f"Cannot load table {table}: {detail}")


class UnknownVatCode(OrderReportError):
    def __init__(self, vat_code: str):
        self.vat_code = vat_code
        super().__init__(f"Unknown VAT code: {vat_code!r}")


class OrderAggregationError(OrderReportError):
    def __init__(self, order_id: str, cause: Exception):
        self.order_id = order_id
        self.cause = cause
        super().__init__(f"Order {order_id} could not be aggregated: {cause}")

from __future__ import annotations

import json
import logging
from decimal import Decimal
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from pydantic import ValidationError

from order_report.app.db.models.core_types import VatCode
from order_report.app.schemas.tax_rules import TaxRules
from order_report.services.errors import ConfigLoadError, UnknownVatCode

logger = logging.getLogger(__name__)


def _code(vat_code: str | VatCode) -> str:
    # VatCode est hashé sur son nom, pas sa valeur
    return vat_code.value if isinstance(vat_code, VatCode) else str(vat_code)


class RateTable:
    """
    Table code TVA -> taux (fraction, ex. 0.20 = 20 %).

    Lecture seule une fois construite : partageable entre threads sans verrou.
    Un code absent est une erreur de données, jamais un taux 0 implicite.
    """

    def __init__(self, rates: Mapping[str, Decimal]):
        self._rates = MappingProxyType({_code(c): Decimal(r) for c, r in rates.items()})

    def rate(self, vat_code: str | VatCode) -> Decimal:
        try:
            return self._rates[_code(vat_code)]
        except KeyError:
            raise UnknownVatCode(vat_code) from None

    def codes(self) -> list[str]:
        return sorted(self._rates)

    def __repr__(self) -> str:
        return f"RateTable({dict(self._rates)!r})"


def load_rate_table(path: str | Path) -> RateTable:
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"), parse_float=Decimal)
        rules = TaxRules.model_validate(raw)
    except OSError as e:
        raise ConfigLoadError(f"Cannot read tax rules {path}: {e}") from e
    except ValueError as e:
        # json.JSONDecodeError et ValidationError héritent de ValueError
        kind = "Invalid" if isinstance(e, ValidationError) else "Malformed"
        raise ConfigLoadError(f"{kind} tax rules {path}: {e}") from e

    table = RateTable(rules.vat)
    logger.info("Loaded %d VAT rates from %s: %s", len(rules.vat), path, ", ".join(table.codes()))
    return table

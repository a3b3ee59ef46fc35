from __future__ import annotations

import logging
from decimal import Decimal
from pathlib import Path
from typing import Any

import pandas as pd
from sqlalchemy import Numeric, insert
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.orm import Session

from order_report.app.db.base import Base
from order_report.app.db.models.models_v1 import LOAD_ORDER
from order_report.services.errors import SourceLoadError

logger = logging.getLogger(__name__)


def reset_schema(bind: Engine | Connection) -> None:
    """
    DROP + CREATE des tables : chaque run repart d'une base propre.

    Appelé sur la connexion de la transaction de chargement, un échec
    du chargement annule aussi le DROP (DDL transactionnel).
    """
    Base.metadata.drop_all(bind=bind)
    Base.metadata.create_all(bind=bind)


def _required_columns(model) -> set[str]:
    return {
        c.name
        for c in model.__table__.columns
        if c.primary_key or (not c.nullable and c.default is None)
    }


def _convert(value: str, column_type) -> Any:
    if value == "":
        return None
    python_type = column_type.python_type
    if python_type is Decimal:
        d = Decimal(value)
        if not d.is_finite():
            raise ValueError(f"not a finite number: {value}")
        # jamais de troncature silencieuse par la colonne
        if isinstance(column_type, Numeric) and column_type.scale is not None \
                and -d.as_tuple().exponent > column_type.scale:
            raise ValueError(f"more than {column_type.scale} decimal places: {value}")
        return d
    if python_type is int:
        return int(value)
    return value


def read_source_file(model, path: Path) -> list[dict[str, Any]]:
    """
    Lit un CSV source et le convertit selon les colonnes du modèle.

    - valeurs et en-têtes trimés
    - cellule vide -> NULL
    - colonnes inconnues ignorées (WARNING)
    """
    table = model.__tablename__
    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    except FileNotFoundError as e:
        raise SourceLoadError(table, f"missing source file {path}") from e
    except ValueError as e:
        # EmptyDataError / ParserError
        raise SourceLoadError(table, f"unreadable source file {path}: {e}") from e

    df.columns = [str(c).strip() for c in df.columns]
    columns = {c.name: c for c in model.__table__.columns}

    missing = _required_columns(model) - set(df.columns)
    if missing:
        raise SourceLoadError(table, f"missing column(s) {', '.join(sorted(missing))}")

    unknown = [c for c in df.columns if c not in columns]
    if unknown:
        logger.warning("Ignoring unknown column(s) in %s: %s", path.name, ", ".join(unknown))
        df = df.drop(columns=unknown)

    not_null = {c.name for c in model.__table__.columns if c.primary_key or not c.nullable}
    records: list[dict[str, Any]] = []
    for line_no, row in enumerate(df.to_dict("records"), start=2):
        record: dict[str, Any] = {}
        for name, raw in row.items():
            try:
                value = _convert(str(raw).strip(), columns[name].type)
            except (ValueError, ArithmeticError) as e:
                raise SourceLoadError(table, f"line {line_no}: bad value {raw!r} for {name}") from e
            if value is None and name in not_null:
                raise SourceLoadError(table, f"line {line_no}: empty value for {name}")
            record[name] = value
        records.append(record)

    return records


def load_tables(db: Session, data_dir: str | Path) -> dict[str, int]:
    """
    Charge les 5 CSV sources (customers, products, stock_levels, orders,
    order_lines) dans cet ordre, un INSERT batch par table.

    La transaction est gérée par l'appelant : tout ou rien.
    """
    data_dir = Path(data_dir)
    counts: dict[str, int] = {}

    for model in LOAD_ORDER:
        table = model.__tablename__
        records = read_source_file(model, data_dir / f"{table}.csv")
        if records:
            db.execute(insert(model), records)
        counts[table] = len(records)
        logger.info("Data added to table %s (%d rows)", table, len(records))

    return counts

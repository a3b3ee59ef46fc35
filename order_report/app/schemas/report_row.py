from pydantic import BaseModel


class ReportRow(BaseModel):
    order_id: str
    customer_name: str

    net_total: str    # "21.67"
    vat_total: str    # gross_total - net_total, PAS la somme des TVA lignes
    gross_total: str
    is_fully_in_stock: bool

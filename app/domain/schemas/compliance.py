from pydantic import BaseModel
from typing import Optional

from app.domain.models import ComplianceBalance


class ComplianceBalanceResponse(BaseModel):
    ship_id: str
    year: int
    route_id: Optional[str]

    energy_in_scope: float          # MJ
    fuel_consumption: float         # tonnes
    ghg_target: float               # gCO2e/MJ
    ghg_actual: float               # gCO2e/MJ

    compliance_balance: float       # gCO2e
    compliance_balance_tonnes: float

    is_compliant: bool
    status: str

    surplus: float
    deficit: float
    surplus_tonnes: float
    deficit_tonnes: float

    penalty: float                  # EUR
    message: str

    @classmethod
    def from_domain(cls, cb: ComplianceBalance) -> "ComplianceBalanceResponse":
        return cls(
            ship_id=cb.ship_id,
            year=cb.year,
            route_id=cb.route_id,
            energy_in_scope=float(cb.energy_in_scope),
            fuel_consumption=float(cb.fuel_consumption),
            ghg_target=float(cb.ghg_target),
            ghg_actual=float(cb.ghg_actual),
            compliance_balance=float(cb.balance),
            compliance_balance_tonnes=float(round(cb.balance_tonnes, 2)),
            is_compliant=cb.is_compliant,
            status=cb.status,
            surplus=float(cb.surplus),
            deficit=float(cb.deficit),
            surplus_tonnes=float(round(cb.surplus_tonnes, 2)),
            deficit_tonnes=float(round(cb.deficit_tonnes, 2)),
            penalty=float(round(cb.penalty, 2)),
            message=cb.message,
        )

from decimal import Decimal
from pydantic import BaseModel, Field
from typing import List, Optional

from app.domain.models import Route
from app.domain.regulation.fueleu import display_tonnes
from app.domain.services.route_service import ComparisonResult


class CreateRouteRequest(BaseModel):
    route_id: str = Field(..., min_length=1, max_length=50, examples=["R001"])
    vessel_type: str = Field(..., min_length=1, examples=["Container"])
    fuel_type: str = Field(..., min_length=1, examples=["HFO"])
    year: int = Field(..., examples=[2024])
    ghg_intensity: float = Field(..., ge=0, allow_inf_nan=False, description="gCO2e/MJ")
    fuel_consumption: float = Field(..., ge=0, allow_inf_nan=False, description="tonnes")
    distance: float = Field(0, ge=0, allow_inf_nan=False, description="km")
    is_baseline: bool = False

    def to_domain(self) -> Route:
        return Route(
            route_id=self.route_id.strip(),
            vessel_type=self.vessel_type,
            fuel_type=self.fuel_type,
            year=self.year,
            ghg_intensity=Decimal(str(self.ghg_intensity)),
            fuel_consumption=Decimal(str(self.fuel_consumption)),
            distance=Decimal(str(self.distance)),
            is_baseline=self.is_baseline,
        )


class RouteResponse(BaseModel):
    id: Optional[int]
    route_id: str
    vessel_type: str
    fuel_type: str
    year: int
    ghg_intensity: float
    fuel_consumption: float
    distance: float
    is_baseline: bool

    @classmethod
    def from_domain(cls, route: Route) -> "RouteResponse":
        return cls(
            id=route.id,
            route_id=route.route_id,
            vessel_type=route.vessel_type,
            fuel_type=route.fuel_type,
            year=route.year,
            ghg_intensity=float(route.ghg_intensity),
            fuel_consumption=float(route.fuel_consumption),
            distance=float(route.distance),
            is_baseline=route.is_baseline,
        )


class RouteComparisonResponse(BaseModel):
    route_id: str
    vessel_type: str
    fuel_type: str
    year: int
    ghg_intensity: float
    percent_diff_from_baseline: float
    compliant: bool
    surplus_tonnes: float
    deficit_tonnes: float


class ComparisonResponse(BaseModel):
    baseline: RouteResponse
    target: float
    year: int
    comparisons: List[RouteComparisonResponse]

    @classmethod
    def from_domain(cls, result: ComparisonResult) -> "ComparisonResponse":
        return cls(
            baseline=RouteResponse.from_domain(result.baseline),
            target=float(result.target),
            year=result.year,
            comparisons=[
                RouteComparisonResponse(
                    route_id=c.route.route_id,
                    vessel_type=c.route.vessel_type,
                    fuel_type=c.route.fuel_type,
                    year=c.route.year,
                    ghg_intensity=float(c.route.ghg_intensity),
                    percent_diff_from_baseline=float(round(c.percent_diff_from_baseline, 2)),
                    compliant=c.compliant,
                    surplus_tonnes=display_tonnes(c.surplus),
                    deficit_tonnes=display_tonnes(c.deficit),
                )
                for c in result.comparisons
            ],
        )

"""
Groundwork Estimator - FastAPI Backend API

This API exposes the estimation engine: one calculate endpoint per
construction method, material pricing, and a PDF estimate report.
"""

import logging
import math
import os
import sys
from typing import Any, Dict, List, Optional, Union
from datetime import datetime

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field, ValidationError
from enum import Enum

load_dotenv()

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from estimator import (
    AggregateCalculator, AggregateInput,
    COMPACTORS,
    Carrier, CalculationResult, CostEstimator, EstimationCatalog, MaterialPrice,
    MaterialUsage, TaskTemplate, TransportOptions,
    CopingCalculator, CopingInput,
    CutMode, Orientation, TileCalculator, TileInput, TileMaterial,
    DeckCalculator, DeckInput, DeckPattern,
    DiggingMethod, FoundationCalculator, FoundationInput, SoilType,
    LayingMethod, PostMethod, WallCalculator, WallInput, WallType,
    MortarCalculator, MortarInput, MortarMode,
    SandCalculator, SandInput,
    Excavation, SoilExcavationCalculator, SoilExcavationInput,
    HaunchType, KerbCalculator, KerbInput, KerbType,
    PavingCalculator, PavingInput,
    SlabCalculator, SlabInput,
    SleeperWallCalculator, SleeperWallInput,
    Type1Calculator, Type1Input,
)
from estimator.cost_estimator import ProjectEstimate
from estimator.material_capacity import CARRIER_SPEEDS, MATERIAL_CAPACITY
from estimator_api.pdf_generator import PDFReportGenerator
from estimator_api.supabase_store import catalog_store

API_VERSION = "1.0.0"
DEFAULT_COMPANY_ID = os.getenv("ESTIMATOR_COMPANY_ID")
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Groundwork Estimator API",
    description="Material, labour and transport estimates for landscaping and groundwork",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configure CORS for frontend access
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize services
pdf_generator = PDFReportGenerator()


# ============================================================================
# Pydantic Models
# ============================================================================

Dimension = Optional[Union[float, str]]


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    version: str


class TaskTemplateInput(BaseModel):
    id: str
    name: str
    unit: str = ""
    estimated_hours: Optional[float] = None


class MaterialPriceInput(BaseModel):
    name: str
    unit: str = ""
    price: Optional[float] = None


class CarrierInput(BaseModel):
    id: str = ""
    name: str = ""
    size_t: float = Field(..., description="Size in tonnes")
    speed_m_per_hour: Optional[float] = None

    def to_carrier(self) -> Carrier:
        return Carrier(id=self.id, name=self.name, size_t=self.size_t,
                       speed_m_per_hour=self.speed_m_per_hour)


class CatalogInput(BaseModel):
    """Inline catalog snapshot, used instead of the Supabase store."""
    templates: List[TaskTemplateInput] = []
    prices: List[MaterialPriceInput] = []
    carriers: List[CarrierInput] = []
    excavators: List[CarrierInput] = []
    mix_ratios: Dict[str, str] = {}

    def to_catalog(self) -> EstimationCatalog:
        return EstimationCatalog(
            templates=[TaskTemplate(t.id, t.name, t.unit, t.estimated_hours) for t in self.templates],
            prices=[MaterialPrice(p.name, p.unit, p.price) for p in self.prices],
            carriers=[c.to_carrier() for c in self.carriers],
            excavators=[c.to_carrier() for c in self.excavators],
            mix_ratios=dict(self.mix_ratios),
        )


class TransportInput(BaseModel):
    carrier_size: Optional[float] = None
    distance: Dimension = None
    carrier_id: Optional[str] = Field(None, description="Carrier from the catalog")

    def to_options(self) -> TransportOptions:
        return TransportOptions(carrier_size=self.carrier_size, distance=self.distance,
                                carrier_id=self.carrier_id)


def _transport(transport: Optional[TransportInput]) -> Optional[TransportOptions]:
    return transport.to_options() if transport is not None else None


class CalculationRequest(BaseModel):
    project_name: str = "Groundwork Estimate"
    company_id: Optional[str] = None
    catalog: Optional[CatalogInput] = None


class FoundationRequest(CalculationRequest):
    length: Dimension = None
    width: Dimension = None
    depth_cm: Dimension = None
    soil_type: SoilType = SoilType.CLAY
    digging_method: DiggingMethod = DiggingMethod.SHOVEL

    def to_input(self) -> FoundationInput:
        return FoundationInput(self.length, self.width, self.depth_cm,
                               self.soil_type, self.digging_method)


class FoundationOption(BaseModel):
    length: Dimension = None
    width: Dimension = None
    depth_cm: Dimension = None
    soil_type: SoilType = SoilType.CLAY
    digging_method: DiggingMethod = DiggingMethod.SHOVEL


class WallRequest(CalculationRequest):
    length: Dimension = None
    height: Dimension = None
    wall_type: WallType = WallType.BRICK
    laying_method: LayingMethod = LayingMethod.STANDING
    openings: Dimension = None
    post_method: PostMethod = PostMethod.CONCRETE
    foundation: Optional[FoundationOption] = None
    transport: Optional[TransportInput] = None

    def to_input(self) -> WallInput:
        foundation = None
        if self.foundation is not None:
            f = self.foundation
            foundation = FoundationInput(f.length, f.width, f.depth_cm, f.soil_type, f.digging_method)
        return WallInput(
            length=self.length,
            height=self.height,
            wall_type=self.wall_type,
            laying_method=self.laying_method,
            openings=self.openings,
            transport=_transport(self.transport),
            foundation=foundation,
            post_method=self.post_method,
        )


class SleeperWallRequest(CalculationRequest):
    length: Dimension = None
    height: Dimension = None
    post_method: PostMethod = PostMethod.CONCRETE
    transport: Optional[TransportInput] = None

    def to_input(self) -> SleeperWallInput:
        return SleeperWallInput(self.length, self.height, self.post_method,
                                _transport(self.transport))


class ExcavationOption(BaseModel):
    """Inline equipment, or ids into the catalog excavators and carriers."""
    excavator: Optional[CarrierInput] = None
    carrier: Optional[CarrierInput] = None
    excavator_id: Optional[str] = None
    carrier_id: Optional[str] = None
    soil_distance: Dimension = None
    tape1_distance: Dimension = None

    def to_excavation(self) -> Excavation:
        return Excavation(
            excavator=self.excavator.to_carrier() if self.excavator is not None else None,
            carrier=self.carrier.to_carrier() if self.carrier is not None else None,
            excavator_id=self.excavator_id,
            carrier_id=self.carrier_id,
            soil_distance=self.soil_distance,
            tape1_distance=self.tape1_distance,
        )


def _excavation(option: Optional[ExcavationOption]) -> Optional[Excavation]:
    return option.to_excavation() if option is not None else None


class SlabRequest(CalculationRequest):
    area: Dimension = None
    type1_thickness_cm: Dimension = None
    mortar_thickness_cm: Dimension = None
    slab_type_id: Optional[str] = None
    cut_slabs: Dimension = None
    soil_excess_cm: Dimension = None
    grouting_id: Optional[str] = None
    compactor_id: Optional[str] = None
    excavation: Optional[ExcavationOption] = None
    transport: Optional[TransportInput] = None

    def to_input(self) -> SlabInput:
        return SlabInput(
            area=self.area,
            type1_thickness_cm=self.type1_thickness_cm,
            mortar_thickness_cm=self.mortar_thickness_cm,
            slab_type_id=self.slab_type_id,
            cut_slabs=self.cut_slabs,
            soil_excess_cm=self.soil_excess_cm,
            grouting_id=self.grouting_id,
            compactor_id=self.compactor_id,
            transport=_transport(self.transport),
            excavation=_excavation(self.excavation),
        )


class PavingRequest(CalculationRequest):
    area: Dimension = None
    sand_thickness_cm: Dimension = None
    type1_thickness_cm: Dimension = None
    block_height_cm: Dimension = None
    cut_blocks: Dimension = None
    soil_excess_cm: Dimension = None
    compactor_id: Optional[str] = None
    sand_material: str = "Sand"
    excavation: Optional[ExcavationOption] = None
    transport: Optional[TransportInput] = None

    def to_input(self) -> PavingInput:
        return PavingInput(
            area=self.area,
            sand_thickness_cm=self.sand_thickness_cm,
            type1_thickness_cm=self.type1_thickness_cm,
            block_height_cm=self.block_height_cm,
            cut_blocks=self.cut_blocks,
            soil_excess_cm=self.soil_excess_cm,
            compactor_id=self.compactor_id,
            sand_material=self.sand_material,
            transport=_transport(self.transport),
            excavation=_excavation(self.excavation),
        )


class KerbRequest(CalculationRequest):
    length: Dimension = None
    base_height_cm: Dimension = None
    kerb_type: KerbType = KerbType.KL
    haunch: HaunchType = HaunchType.FULL_BOTH
    rumbled_standing: bool = False
    transport: Optional[TransportInput] = None

    def to_input(self) -> KerbInput:
        return KerbInput(self.length, self.base_height_cm, self.kerb_type, self.haunch,
                         self.rumbled_standing, _transport(self.transport))


class SoilExcavationRequest(CalculationRequest):
    excavation: ExcavationOption
    tons: Dimension = None
    length: Dimension = None
    width: Dimension = None
    depth_cm: Dimension = None
    distance: Dimension = None

    def to_input(self) -> SoilExcavationInput:
        return SoilExcavationInput(
            excavation=self.excavation.to_excavation(),
            tons=self.tons,
            length=self.length,
            width=self.width,
            depth_cm=self.depth_cm,
            distance=self.distance,
        )


class TileRequest(CalculationRequest):
    length: Dimension = None
    height: Dimension = None
    slab_width_cm: int = 120
    slab_height_cm: int = 30
    orientation: Orientation = Orientation.LONG
    gap_mm: int = 2
    adhesive_thickness_cm: float = 0.5
    length_cut: CutMode = CutMode.ONE_CUT
    height_cut: CutMode = CutMode.ONE_CUT
    material: TileMaterial = TileMaterial.PORCELAIN
    grouting_id: Optional[str] = None
    transport: Optional[TransportInput] = None

    def to_input(self) -> TileInput:
        return TileInput(
            length=self.length,
            height=self.height,
            slab_size=(self.slab_width_cm, self.slab_height_cm),
            orientation=self.orientation,
            gap_mm=self.gap_mm,
            adhesive_thickness_cm=self.adhesive_thickness_cm,
            length_cut=self.length_cut,
            height_cut=self.height_cut,
            material=self.material,
            grouting_id=self.grouting_id,
            transport=_transport(self.transport),
        )


class CopingRequest(CalculationRequest):
    length: Dimension = None
    slab_length_cm: Dimension = 90
    slab_width_cm: Dimension = 60
    gap_mm: int = 2
    adhesive_thickness_cm: Dimension = 0.5
    corners: Dimension = None
    mitre_45: bool = False
    grouting_id: Optional[str] = None
    transport: Optional[TransportInput] = None

    def to_input(self) -> CopingInput:
        return CopingInput(
            length=self.length,
            slab_length_cm=self.slab_length_cm,
            slab_width_cm=self.slab_width_cm,
            gap_mm=self.gap_mm,
            adhesive_thickness_cm=self.adhesive_thickness_cm,
            corners=self.corners,
            mitre_45=self.mitre_45,
            grouting_id=self.grouting_id,
            transport=_transport(self.transport),
        )


class DeckRequest(CalculationRequest):
    length: Dimension = None
    width: Dimension = None
    joist_length: Dimension = None
    joist_spacing: Dimension = None
    board_length: Dimension = None
    board_width_cm: Dimension = None
    joint_gap_mm: Dimension = None
    pattern: DeckPattern = DeckPattern.LENGTH
    include_frame: bool = False
    half_shift: bool = False
    postmix_per_post: Dimension = None
    transport: Optional[TransportInput] = None

    def to_input(self) -> DeckInput:
        return DeckInput(
            length=self.length,
            width=self.width,
            joist_length=self.joist_length,
            joist_spacing=self.joist_spacing,
            board_length=self.board_length,
            board_width_cm=self.board_width_cm,
            joint_gap_mm=self.joint_gap_mm,
            pattern=self.pattern,
            include_frame=self.include_frame,
            half_shift=self.half_shift,
            postmix_per_post=self.postmix_per_post,
            transport=_transport(self.transport),
        )


class SandRequest(CalculationRequest):
    length: Dimension = None
    width: Dimension = None
    height_mm: Dimension = None
    material: str = "Grid Sand"
    transport: Optional[TransportInput] = None

    def to_input(self) -> SandInput:
        return SandInput(self.length, self.width, self.height_mm, self.material,
                         _transport(self.transport))


class AggregateRequest(CalculationRequest):
    length: Dimension = None
    width: Dimension = None
    depth_cm: Dimension = None
    material: str = "Type 1 Aggregate"

    def to_input(self) -> AggregateInput:
        return AggregateInput(self.length, self.width, self.depth_cm, self.material)


class MortarRequest(CalculationRequest):
    mode: MortarMode = MortarMode.GENERAL
    area: Dimension = None
    length: Dimension = None
    width: Dimension = None
    thickness_cm: Dimension = None

    def to_input(self) -> MortarInput:
        return MortarInput(self.mode, self.area, self.length, self.width, self.thickness_cm)


class Type1Request(CalculationRequest):
    depth_cm: Dimension = None
    tons: Dimension = None
    length: Dimension = None
    width: Dimension = None
    excavator: Optional[CarrierInput] = None
    excavator_id: Optional[str] = None
    compactor_id: Optional[str] = None
    transport: Optional[TransportInput] = None

    def to_input(self) -> Type1Input:
        return Type1Input(
            depth_cm=self.depth_cm,
            tons=self.tons,
            length=self.length,
            width=self.width,
            excavator=self.excavator.to_carrier() if self.excavator is not None else None,
            excavator_id=self.excavator_id,
            compactor_id=self.compactor_id,
            transport=_transport(self.transport),
        )


class MaterialResponse(BaseModel):
    name: str
    quantity: float
    unit: str
    price_per_unit: Optional[float] = None
    total_price: Optional[float] = None


class TaskResponse(BaseModel):
    task: str
    hours: float
    amount: Union[float, str]
    unit: str
    normalized_hours: Optional[float] = None
    event_task_id: Optional[str] = None


class CalculationResponse(BaseModel):
    name: str
    amount: float
    unit: str
    hours_worked: float
    total_hours: float
    materials: List[MaterialResponse]
    taskBreakdown: List[TaskResponse]
    subtotal_materials: float
    unpriced_materials: List[str]
    details: Dict[str, Any] = {}
    warnings: List[str] = []


class MaterialInput(BaseModel):
    name: str
    quantity: float
    unit: str = ""


class PriceRequest(BaseModel):
    materials: List[MaterialInput]
    company_id: Optional[str] = None
    prices: Optional[List[MaterialPriceInput]] = None


class PriceResponse(BaseModel):
    materials: List[MaterialResponse]
    subtotal_materials: float
    unpriced_materials: List[str]


class CalculatorKind(str, Enum):
    wall = "wall"
    sleeper_wall = "sleeper-wall"
    foundation = "foundation"
    slab = "slab"
    paving = "paving"
    kerbs = "kerbs"
    soil_excavation = "soil-excavation"
    tile = "tile"
    coping = "coping"
    deck = "deck"
    sand = "sand"
    aggregate = "aggregate"
    mortar = "mortar"
    type1 = "type1"


class PDFReportRequest(BaseModel):
    calculator: CalculatorKind
    input: Dict[str, Any]


# (request model, engine) per calculate endpoint
CALCULATORS = {
    CalculatorKind.wall: (WallRequest, WallCalculator),
    CalculatorKind.sleeper_wall: (SleeperWallRequest, SleeperWallCalculator),
    CalculatorKind.foundation: (FoundationRequest, FoundationCalculator),
    CalculatorKind.slab: (SlabRequest, SlabCalculator),
    CalculatorKind.paving: (PavingRequest, PavingCalculator),
    CalculatorKind.kerbs: (KerbRequest, KerbCalculator),
    CalculatorKind.soil_excavation: (SoilExcavationRequest, SoilExcavationCalculator),
    CalculatorKind.tile: (TileRequest, TileCalculator),
    CalculatorKind.coping: (CopingRequest, CopingCalculator),
    CalculatorKind.deck: (DeckRequest, DeckCalculator),
    CalculatorKind.sand: (SandRequest, SandCalculator),
    CalculatorKind.aggregate: (AggregateRequest, AggregateCalculator),
    CalculatorKind.mortar: (MortarRequest, MortarCalculator),
    CalculatorKind.type1: (Type1Request, Type1Calculator),
}


# ============================================================================
# Helpers
# ============================================================================

def _finite(value: Optional[float]) -> Optional[float]:
    """JSON has no NaN or infinity; report those as null."""
    if value is None or not math.isfinite(value):
        return None
    return value


def resolve_catalog(company_id: Optional[str], catalog: Optional[CatalogInput]) -> EstimationCatalog:
    if catalog is not None:
        return catalog.to_catalog()
    return catalog_store.load_catalog(company_id or DEFAULT_COMPANY_ID)


def material_response(material: MaterialUsage) -> MaterialResponse:
    return MaterialResponse(
        name=material.name,
        quantity=material.amount,
        unit=material.unit,
        price_per_unit=material.price_per_unit,
        total_price=material.total_price,
    )


def calculation_response(estimate: ProjectEstimate) -> CalculationResponse:
    result: CalculationResult = estimate.calculation
    contract = result.to_dict()
    return CalculationResponse(
        name=contract["name"],
        amount=contract["amount"],
        unit=contract["unit"],
        hours_worked=contract["hours_worked"],
        total_hours=result.total_hours,
        materials=[material_response(m) for m in estimate.materials],
        taskBreakdown=[
            TaskResponse(
                task=t.task,
                hours=t.hours,
                amount=t.amount,
                unit=t.unit,
                normalized_hours=_finite(t.normalized_hours),
                event_task_id=t.event_task_id,
            )
            for t in result.task_breakdown
        ],
        subtotal_materials=estimate.subtotal_materials,
        unpriced_materials=estimate.unpriced_materials,
        details=result.details,
        warnings=list(result.warnings),
    )


def estimate_request(request: CalculationRequest, calculator_cls) -> ProjectEstimate:
    """
    Run one engine over a request and price its materials.

    Raises:
        HTTPException: 422 with the validation messages when the input
            is incomplete
    """
    catalog = resolve_catalog(request.company_id, request.catalog)
    calculator = calculator_cls(catalog)
    engine_input = request.to_input()

    errors = calculator.validate(engine_input)
    if errors:
        raise HTTPException(status_code=422, detail=errors)

    result = calculator.calculate(engine_input)
    return CostEstimator(catalog.prices).estimate_project(request.project_name, result)


def run_calculation(request: CalculationRequest, calculator_cls) -> CalculationResponse:
    try:
        estimate = estimate_request(request, calculator_cls)
        return calculation_response(estimate)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("%s failed", calculator_cls.__name__)
        raise HTTPException(status_code=500, detail=str(e))


# ============================================================================
# API Endpoints
# ============================================================================

@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now().isoformat(),
        version=API_VERSION
    )


@app.post("/api/v1/calculate/wall", response_model=CalculationResponse)
async def calculate_wall(request: WallRequest):
    """Brick and block walls; wall_type "sleeper" is handled as a sleeper wall."""
    return run_calculation(request, WallCalculator)


@app.post("/api/v1/calculate/sleeper-wall", response_model=CalculationResponse)
async def calculate_sleeper_wall(request: SleeperWallRequest):
    return run_calculation(request, SleeperWallCalculator)


@app.post("/api/v1/calculate/foundation", response_model=CalculationResponse)
async def calculate_foundation(request: FoundationRequest):
    return run_calculation(request, FoundationCalculator)


@app.post("/api/v1/calculate/slab", response_model=CalculationResponse)
async def calculate_slab(request: SlabRequest):
    """Paving slabs on mortar over type 1, with optional machine dig-out."""
    return run_calculation(request, SlabCalculator)


@app.post("/api/v1/calculate/paving", response_model=CalculationResponse)
async def calculate_paving(request: PavingRequest):
    """Monoblock paving on sand over type 1, with optional machine dig-out."""
    return run_calculation(request, PavingCalculator)


@app.post("/api/v1/calculate/kerbs", response_model=CalculationResponse)
async def calculate_kerbs(request: KerbRequest):
    """Kerbs, flat edges and sets on a mortar bed."""
    return run_calculation(request, KerbCalculator)


@app.post("/api/v1/calculate/soil-excavation", response_model=CalculationResponse)
async def calculate_soil_excavation(request: SoilExcavationRequest):
    return run_calculation(request, SoilExcavationCalculator)


@app.post("/api/v1/calculate/tile", response_model=CalculationResponse)
async def calculate_tile(request: TileRequest):
    return run_calculation(request, TileCalculator)


@app.post("/api/v1/calculate/coping", response_model=CalculationResponse)
async def calculate_coping(request: CopingRequest):
    return run_calculation(request, CopingCalculator)


@app.post("/api/v1/calculate/deck", response_model=CalculationResponse)
async def calculate_deck(request: DeckRequest):
    return run_calculation(request, DeckCalculator)


@app.post("/api/v1/calculate/sand", response_model=CalculationResponse)
async def calculate_sand(request: SandRequest):
    return run_calculation(request, SandCalculator)


@app.post("/api/v1/calculate/aggregate", response_model=CalculationResponse)
async def calculate_aggregate(request: AggregateRequest):
    return run_calculation(request, AggregateCalculator)


@app.post("/api/v1/calculate/mortar", response_model=CalculationResponse)
async def calculate_mortar(request: MortarRequest):
    return run_calculation(request, MortarCalculator)


@app.post("/api/v1/calculate/type1", response_model=CalculationResponse)
async def calculate_type1(request: Type1Request):
    return run_calculation(request, Type1Calculator)


@app.post("/api/v1/price", response_model=PriceResponse)
async def price_materials(request: PriceRequest):
    """
    Attach prices to a list of materials.

    Uses the submitted price list when given, otherwise the company's
    price list from the store.
    """
    try:
        if request.prices is not None:
            prices = [MaterialPrice(p.name, p.unit, p.price) for p in request.prices]
        else:
            prices = catalog_store.load_prices(request.company_id or DEFAULT_COMPANY_ID)
        estimator = CostEstimator(prices)
        priced = estimator.estimate_materials(
            MaterialUsage(m.name, m.quantity, m.unit) for m in request.materials
        )
        subtotal = sum(m.total_price for m in priced if m.total_price is not None)
        return PriceResponse(
            materials=[material_response(m) for m in priced],
            subtotal_materials=round(subtotal, 2),
            unpriced_materials=[m.name for m in priced if m.total_price is None],
        )
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/api/v1/report/pdf")
async def generate_pdf_report(request: PDFReportRequest):
    """
    Generate a priced estimate PDF for one calculation.

    Returns: PDF file as a downloadable stream
    """
    request_model, calculator_cls = CALCULATORS[request.calculator]
    try:
        calculation = request_model(**request.input)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    try:
        estimate = estimate_request(calculation, calculator_cls)
        pdf_buffer = pdf_generator.generate_report(estimate)

        # Create filename for download
        safe_project_name = "".join(
            c for c in calculation.project_name if c.isalnum() or c in (' ', '-', '_')
        ).rstrip()
        download_filename = f"{safe_project_name or 'estimate'}_report.pdf"

        return StreamingResponse(
            pdf_buffer,
            media_type="application/pdf",
            headers={
                "Content-Disposition": f'attachment; filename="{download_filename}"'
            }
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("PDF report failed")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/api/v1/reference")
async def get_reference_data():
    """Carrier speeds, carrier capacities per material and compactors."""
    return {
        "carrier_speeds": {f"{size:g}": speed for size, speed in CARRIER_SPEEDS.items()},
        "material_capacity": {
            material: {f"{size:g}": capacity for size, capacity in sizes.items()}
            for material, sizes in MATERIAL_CAPACITY.items()
        },
        "compactors": [
            {
                "id": c.id,
                "name": c.name,
                "weight_range": c.weight_range,
                "width_m": c.width_m,
                "max_layer_cm": c.max_layer_cm,
                "normalized_tempo": c.normalized_tempo,
                "task_name": c.task_name,
            }
            for c in COMPACTORS.values()
        ],
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

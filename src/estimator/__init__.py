from .models import TaskTemplate, MaterialPrice, Carrier, EstimationCatalog, TransportOptions, MaterialUsage, TaskEntry, CalculationResult
from .lookup import Ok, Fallback, Lookup
from .dimensions import DimensionParser, parse_dimension, parse_count, parse_distance, parse_mix_ratio
from .material_capacity import find_carrier_speed, get_material_capacity, lookup_carrier_speed, lookup_material_capacity
from .transport import TransportEstimate, estimate_transport, estimate_carry_on_foot, normalize_to_reference
from .task_matcher import TaskMatcher, score_dimensions
from .labour import TaskBreakdown
from .cost_estimator import CostEstimator, ProjectEstimate, format_price
from .compacting import COMPACTORS, CompactedMaterial, Compactor, compacting_time, get_compactor
from .wall_calculator import WallCalculator, WallInput, WallType, LayingMethod
from .foundation_calculator import FoundationCalculator, FoundationInput, SoilType, DiggingMethod
from .sleeper_wall_calculator import SleeperWallCalculator, SleeperWallInput, PostMethod
from .excavation import Excavation, SoilExcavationCalculator, SoilExcavationInput
from .slab_calculator import SlabCalculator, SlabInput
from .paving_calculator import PavingCalculator, PavingInput
from .kerb_calculator import KerbCalculator, KerbInput, KerbType, HaunchType
from .tile_calculator import TileCalculator, TileInput, Orientation, CutMode, TileMaterial
from .coping_calculator import CopingCalculator, CopingInput
from .deck_calculator import DeckCalculator, DeckInput, DeckPattern
from .bulk_calculator import SandCalculator, SandInput, AggregateCalculator, AggregateInput, MortarCalculator, MortarInput, MortarMode, Type1Calculator, Type1Input

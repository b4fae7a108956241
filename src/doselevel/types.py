# src/doselevel/types.py
import math
from dataclasses import dataclass
from datetime import datetime
from typing import NamedTuple, Optional, Sequence

# Half-lives are always in HOURS. Timestamps are datetimes; the engine
# converts elapsed time to hours before doing any kinetics.


@dataclass(frozen=True)
class DosingEvent:
    """
    A single logged injection.

    timestamp    : when the dose was administered
    amount_mg    : dose size in milligrams
    half_life_h  : elimination half-life of the compound (hours), or None when
                   the medication behind the injection can't be resolved
    drug_id      : name of the compound this dose belongs to (e.g., "Semaglutide")
    """
    timestamp: datetime
    amount_mg: float
    half_life_h: Optional[float] = None
    drug_id: str = "default"

    @property
    def has_half_life(self) -> bool:
        h = self.half_life_h
        return h is not None and math.isfinite(h) and h > 0


class LevelSample(NamedTuple):
    """Estimated level (dose-equivalent mg) at one instant."""
    timestamp: datetime
    level_mg: float


class Trough(NamedTuple):
    """Projected trough: when the next dose is due and the level left at that point."""
    timestamp: datetime
    level_mg: float


@dataclass(frozen=True)
class Medication:
    """
    A compound the user injects.

    default_dosages_mg : titration steps offered when logging a dose
    is_compound        : True for compounded (reconstituted) product
    """
    name: str
    half_life_h: float
    brand_name: Optional[str] = None
    default_dosages_mg: Sequence[float] = ()
    is_compound: bool = False

    def dose(self, timestamp: datetime, amount_mg: float) -> DosingEvent:
        return DosingEvent(timestamp=timestamp, amount_mg=float(amount_mg),
                           half_life_h=self.half_life_h, drug_id=self.name)


@dataclass(frozen=True)
class ReconstitutionResult:
    """
    Outcome of dissolving a lyophilized peptide.

    concentration_mg_per_ml : peptide per mL of diluent
    draw_volume_ml          : volume to draw for the desired dose
    syringe_units           : draw volume read on a U-100 insulin syringe
    """
    concentration_mg_per_ml: float
    draw_volume_ml: float
    syringe_units: float

    def syringe_fill_fraction(self, capacity_units: float = 100.0) -> float:
        """Share of the syringe barrel taken up by the draw, clamped to [0, 1]."""
        if capacity_units <= 0:
            return 0.0
        return min(max(self.syringe_units / capacity_units, 0.0), 1.0)


@dataclass(frozen=True)
class PeptidePreset:
    """
    Reference values used to pre-fill the calculator.

    vial_mg          : common vial size
    water_ml         : suggested bacteriostatic water volume
    typical_dose_mcg : typical single dose
    half_life_h      : reference elimination half-life
    """
    name: str
    vial_mg: float
    water_ml: float
    typical_dose_mcg: float
    half_life_h: float

    @property
    def typical_dose_mg(self) -> float:
        return self.typical_dose_mcg / 1000.0

    def medication(self) -> Medication:
        return Medication(name=self.name, half_life_h=self.half_life_h, is_compound=True)

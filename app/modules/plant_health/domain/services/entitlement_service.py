# 📄 File: app/modules/plant_health/domain/services/entitlement_service.py
# 🧭 Purpose (Layman Explanation):
# Decides whether a free user may add another plant, ask for another diagnosis this month,
# or add another progress photo. Premium users are never limited.
# 🧪 Purpose (Technical Summary):
# Pure entitlement gate evaluating free-vs-premium limits against current counts.
# evaluate_* return an EntitlementDecision; enforce_* raise QuotaExceededError.
# 🔗 Dependencies:
# dataclasses, enum, app.shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# plant_care_service.py, plant repository (photo limit), home dashboard

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from app.shared.core.exceptions import QuotaExceededError


class GatedAction(str, Enum):
    ADD_PLANT = "plants"
    REQUEST_DIAGNOSIS = "diagnoses"
    ADD_PHOTO = "photos"


@dataclass(frozen=True)
class EntitlementDecision:
    action: GatedAction
    allowed: bool
    current: int
    maximum: Optional[int]

    @property
    def limit(self) -> str:
        return self.action.value

    @property
    def remaining(self) -> Optional[int]:
        if self.maximum is None:
            return None
        return max(0, self.maximum - self.current)

    def raise_if_denied(self) -> None:
        if not self.allowed:
            raise QuotaExceededError(limit=self.limit, current=self.current, maximum=self.maximum)


class EntitlementGate:
    """
    Free tier limits.

    An action is allowed on the free tier while the current count is
    strictly below the limit: with a plant limit of 3, the 4th plant is
    denied.
    """

    def __init__(self, plant_limit: int = 3, diagnosis_limit: int = 2, photo_limit: int = 5):
        self.free_limits = {
            GatedAction.ADD_PLANT: plant_limit,
            GatedAction.REQUEST_DIAGNOSIS: diagnosis_limit,
            GatedAction.ADD_PHOTO: photo_limit,
        }

    @classmethod
    def from_settings(cls, settings) -> "EntitlementGate":
        limits = settings.get_entitlement_limits()
        return cls(
            plant_limit=limits["plants"],
            diagnosis_limit=limits["diagnoses"],
            photo_limit=limits["photos"],
        )

    def evaluate(self, action: GatedAction, is_premium: bool, current: int) -> EntitlementDecision:
        if is_premium:
            return EntitlementDecision(action, True, current, None)
        maximum = self.free_limits[action]
        return EntitlementDecision(action, current < maximum, current, maximum)

    def evaluate_add_plant(self, is_premium: bool, plant_count: int) -> EntitlementDecision:
        return self.evaluate(GatedAction.ADD_PLANT, is_premium, plant_count)

    def evaluate_diagnosis(self, is_premium: bool, diagnoses_this_month: int) -> EntitlementDecision:
        return self.evaluate(GatedAction.REQUEST_DIAGNOSIS, is_premium, diagnoses_this_month)

    def evaluate_add_photo(self, is_premium: bool, photo_count: int) -> EntitlementDecision:
        return self.evaluate(GatedAction.ADD_PHOTO, is_premium, photo_count)

    def enforce_add_plant(self, is_premium: bool, plant_count: int) -> None:
        self.evaluate_add_plant(is_premium, plant_count).raise_if_denied()

    def enforce_diagnosis(self, is_premium: bool, diagnoses_this_month: int) -> None:
        self.evaluate_diagnosis(is_premium, diagnoses_this_month).raise_if_denied()

    def enforce_add_photo(self, is_premium: bool, photo_count: int) -> None:
        self.evaluate_add_photo(is_premium, photo_count).raise_if_denied()

# moodtracker/services/factors.py
import logging
from typing import Any, Mapping

from sqlalchemy.orm import Session

from moodtracker.core.errors import NotFoundError
from moodtracker.models.factor import Factor
from moodtracker.schemas.factor import FactorOut
from moodtracker.services.result import ServiceResult, service_operation
from moodtracker.services.validators import require_id, validate_factor

logger = logging.getLogger(__name__)

# catalog installed into an empty factors table at startup
DEFAULT_FACTORS = [
    ("Slept well", "Sleep", "bed"),
    ("Poor sleep", "Sleep", "moon"),
    ("Healthy meal", "Nutrition", "salad"),
    ("Skipped meal", "Nutrition", "plate"),
    ("Exercise", "Physical Activity", "run"),
    ("Time with friends", "Social", "users"),
    ("Family", "Social", "home"),
    ("Deadline", "Work/School", "briefcase"),
    ("Weather", "Environment", "cloud"),
    ("Anxiety", "Mental Health", "brain"),
    ("Caffeine", "Substance Use", "coffee"),
    ("Alcohol", "Substance Use", "wine"),
    ("Screen time", "Technology", "phone"),
    ("Morning routine", "Routine", "sunrise"),
]


def factor_payload(factor: Factor) -> dict:
    return FactorOut.model_validate(factor).model_dump(mode="json")


def seed_factors(db: Session) -> int:
    if db.query(Factor).count() > 0:
        return 0
    db.add_all(Factor(name=name, category=category, icon=icon) for name, category, icon in DEFAULT_FACTORS)
    db.commit()
    logger.info("🌱 Seeded %d default factors", len(DEFAULT_FACTORS))
    return len(DEFAULT_FACTORS)


@service_operation
def list_factors(db: Session) -> ServiceResult:
    factors = db.query(Factor).order_by(Factor.factor_id.asc()).all()
    return ServiceResult.success([factor_payload(f) for f in factors], "Factors retrieved successfully")


@service_operation
def create_factor(db: Session, data: Mapping[str, Any]) -> ServiceResult:
    fields = validate_factor(data).model_dump()
    factor = Factor(**fields)
    db.add(factor)
    db.commit()
    db.refresh(factor)

    logger.info("✅ Factor created: factor_id=%s category=%s", factor.factor_id, factor.category)
    return ServiceResult.success(factor_payload(factor), "Factor created successfully")


@service_operation
def update_factor(db: Session, factor_id: Any, updates: Mapping[str, Any]) -> ServiceResult:
    require_id(factor_id, "factor")
    fields = validate_factor(updates, partial=True).model_dump(exclude_unset=True)

    updated = (
        db.query(Factor)
        .filter(Factor.factor_id == factor_id)
        .update(fields, synchronize_session=False)
    )
    if updated == 0:
        raise NotFoundError("Factor not found")
    db.commit()

    factor = db.query(Factor).filter(Factor.factor_id == factor_id).first()
    db.refresh(factor)
    logger.info("✅ Factor updated: factor_id=%s", factor_id)
    return ServiceResult.success(factor_payload(factor), "Factor updated successfully")


@service_operation
def delete_factor(db: Session, factor_id: Any) -> ServiceResult:
    require_id(factor_id, "factor")
    deleted = db.query(Factor).filter(Factor.factor_id == factor_id).delete(synchronize_session=False)
    if deleted == 0:
        raise NotFoundError("Factor not found")
    db.commit()

    logger.info("🗑️ Factor deleted: factor_id=%s", factor_id)
    return ServiceResult.success(None, "Factor deleted successfully")

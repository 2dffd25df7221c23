"""
Rate sheet: per-service commission amounts.

The default sheet is the marketplace price list. Seeding is idempotent:
rows are matched to existing categories by name (case-insensitive) and
updated in place, otherwise created.
"""

import logging
from decimal import Decimal
from typing import Sequence, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models import ServiceCategory
from src.services.exceptions import CommissionValidationError, RecordNotFound

logger = logging.getLogger(__name__)

# (service, base_cost, salesman, override, corp)
DEFAULT_RATE_SHEET: Tuple[Tuple[str, str, str, str, str], ...] = (
    ("Decks & Porches", "200.00", "100.00", "20.00", "80.00"),
    ("Electrical", "140.00", "70.00", "14.00", "56.00"),
    ("Epoxy Flooring", "150.00", "75.00", "15.00", "60.00"),
    ("Fencing", "200.00", "100.00", "20.00", "80.00"),
    ("Flooring & Hardwood", "250.00", "125.00", "25.00", "100.00"),
    ("Foundation Repair", "250.00", "125.00", "25.00", "100.00"),
    ("Handyman", "120.00", "60.00", "12.00", "48.00"),
    ("Heating & Cooling", "200.00", "100.00", "20.00", "80.00"),
    ("Insulation", "150.00", "75.00", "15.00", "60.00"),
    ("Kitchen Remodeling", "400.00", "200.00", "40.00", "160.00"),
    ("Outdoor Remodeling", "300.00", "150.00", "30.00", "120.00"),
    ("Painting Interior & Exterior", "200.00", "100.00", "20.00", "80.00"),
    ("Patio Covers", "200.00", "100.00", "20.00", "80.00"),
    ("Pest Control", "150.00", "75.00", "15.00", "60.00"),
    ("Plumbing", "150.00", "75.00", "15.00", "60.00"),
    ("Rain Gutters", "250.00", "125.00", "25.00", "100.00"),
    ("Reglazing (Bath & Countertop)", "50.00", "25.00", "5.00", "20.00"),
    ("Restoration (Fire and Water)", "350.00", "175.00", "35.00", "140.00"),
    ("Roofing", "400.00", "200.00", "40.00", "160.00"),
    ("Room Additions/New Construction", "400.00", "200.00", "40.00", "160.00"),
    ("Shutters/Shades/Blinds", "200.00", "100.00", "20.00", "80.00"),
    ("Siding", "150.00", "75.00", "15.00", "60.00"),
    ("Swimming Pools", "300.00", "150.00", "30.00", "120.00"),
    ("Tree Service", "150.00", "75.00", "15.00", "60.00"),
    ("Walk-in Tubs", "400.00", "200.00", "40.00", "160.00"),
    ("Windows & Doors", "300.00", "150.00", "30.00", "120.00"),
    ("Wood Refinishing", "150.00", "75.00", "15.00", "60.00"),
    ("Pool service", "155.00", "77.50", "15.50", "62.00"),
    ("concrete patio/drive walk", "155.00", "77.50", "15.50", "62.00"),
    ("remodel", "444.00", "222.00", "44.40", "177.60"),
    ("House cleaning", "77.00", "38.50", "7.70", "30.80"),
    ("Block wall/ fence", "111.00", "55.50", "11.10", "44.40"),
    ("landscaping", "77.00", "38.50", "7.70", "30.80"),
    ("vet services", "77.00", "38.50", "7.70", "30.80"),
    ("interior design", "111.00", "55.50", "11.10", "44.40"),
    ("low voltage", "77.00", "38.50", "7.70", "30.80"),
    ("HVAC", "111.00", "55.50", "11.10", "44.40"),
    ("Turf", "111.00", "55.50", "11.10", "44.40"),
    ("handy man service", "111.00", "55.50", "11.10", "44.40"),
    ("sheet rock", "111.00", "55.50", "11.10", "44.40"),
    ("general contracting remodel", "444.00", "222.00", "44.40", "177.60"),
    ("garbage haul off", "111.00", "55.50", "11.10", "44.40"),
    ("solar", "444.00", "222.00", "44.40", "177.60"),
    ("excavation", "166.00", "83.00", "16.60", "66.40"),
    ("stone and masonry", "222.00", "111.00", "22.20", "88.80"),
    ("window and door install", "333.00", "166.50", "33.30", "133.20"),
    ("trim carpentry", "111.00", "55.50", "11.10", "44.40"),
    ("countertops", "222.00", "111.00", "22.20", "88.80"),
    ("fireplace", "111.00", "55.50", "11.10", "44.40"),
    ("smart home automation", "111.00", "55.50", "11.10", "44.40"),
    ("generator install", "77.00", "38.50", "7.70", "30.80"),
    ("home security and surveillance", "111.00", "55.50", "11.10", "44.40"),
    ("tile", "77.00", "38.50", "7.70", "30.80"),
    ("carpet", "77.00", "38.50", "7.70", "30.80"),
    ("concrete polishing", "111.00", "55.50", "11.10", "44.40"),
    ("appliances", "77.00", "38.50", "7.70", "30.80"),
    ("home inspection", "77.00", "38.50", "7.70", "30.80"),
    ("landscape design", "222.00", "111.00", "22.20", "88.80"),
    ("outdoor kitchens", "333.00", "166.50", "33.30", "133.20"),
    ("blinds and shutters", "111.00", "55.50", "11.10", "44.40"),
    ("property management", "77.00", "38.50", "7.70", "30.80"),
    ("hvac maintenance", "77.00", "38.50", "7.70", "30.80"),
    ("water softeners and filtration", "77.00", "38.50", "7.70", "30.80"),
    ("window washing", "77.00", "38.50", "7.70", "30.80"),
    ("garage door", "77.00", "38.50", "7.70", "30.80"),
)


def _validate_amounts(**amounts: Decimal) -> dict:
    validated = {}
    for field, value in amounts.items():
        value = Decimal(str(value))
        if value < 0:
            raise CommissionValidationError(f"{field} cannot be negative")
        validated[field] = value
    return validated


async def seed_rate_sheet(db: AsyncSession) -> Tuple[int, int]:
    """
    Load DEFAULT_RATE_SHEET into service_categories.

    Returns:
        (created, updated) row counts
    """
    result = await db.execute(select(ServiceCategory))
    existing = {c.name.lower(): c for c in result.scalars().all()}

    created = updated = 0
    for name, base_cost, salesman, override, corp in DEFAULT_RATE_SHEET:
        amounts = {
            "base_cost": Decimal(base_cost),
            "salesman_commission": Decimal(salesman),
            "override_commission": Decimal(override),
            "corp_commission": Decimal(corp),
        }

        category = existing.get(name.lower())
        if category is not None:
            for field, value in amounts.items():
                setattr(category, field, value)
            updated += 1
            continue

        category = ServiceCategory(
            name=name,
            description=f"{name} services",
            is_active=True,
            **amounts,
        )
        db.add(category)
        existing[name.lower()] = category
        created += 1

    await db.commit()
    logger.info(f"Rate sheet seeded: {created} created, {updated} updated")
    return created, updated


async def count_service_categories(db: AsyncSession) -> int:
    return await db.scalar(select(func.count(ServiceCategory.id))) or 0


async def list_service_rates(db: AsyncSession) -> Sequence[ServiceCategory]:
    """All categories with their commission amounts, by name."""
    result = await db.execute(select(ServiceCategory).order_by(ServiceCategory.name))
    return result.scalars().all()


async def update_service_rates(
    db: AsyncSession,
    service_id: int,
    base_cost: Decimal,
    salesman_commission: Decimal,
    override_commission: Decimal,
    corp_commission: Decimal,
) -> ServiceCategory:
    """
    Replace the four commission amounts of a category.

    Existing commission records keep the amounts they were created with.

    Raises:
        CommissionValidationError: if any amount is negative
        RecordNotFound: if the category does not exist
    """
    amounts = _validate_amounts(
        base_cost=base_cost,
        salesman_commission=salesman_commission,
        override_commission=override_commission,
        corp_commission=corp_commission,
    )

    category = await db.get(ServiceCategory, service_id)
    if category is None:
        raise RecordNotFound("Service category", service_id)

    for field, value in amounts.items():
        setattr(category, field, value)
    await db.commit()

    logger.info(
        f"Rates updated for '{category.name}': base={amounts['base_cost']} "
        f"salesman={amounts['salesman_commission']}"
    )
    return category

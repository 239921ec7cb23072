import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from .. import models, schemas
from ..auth import require_admin
from ..database import get_db

logger = logging.getLogger("powderpro.materials")

router = APIRouter(prefix="/materials", tags=["materials"])

MATERIAL_CATEGORIES = [
    {"id": "automotive", "name": "Automotive", "description": "Materials for automotive applications and components"},
    {"id": "industrial", "name": "Industrial", "description": "Heavy-duty industrial equipment and machinery components"},
    {"id": "commercial", "name": "Commercial", "description": "Commercial and retail applications"},
    {"id": "architectural", "name": "Architectural", "description": "Building and construction components"},
    {"id": "consumer", "name": "Consumer Products", "description": "Consumer goods and appliances"},
]

# Default per-unit coating prices: update via API as shop rates change
DEFAULT_MATERIALS = {
    # Automotive
    "Alloy Wheels": {"price_per_unit": 45.00, "unit": "wheel", "category": "automotive", "description": "Custom alloy wheels, various sizes available", "min_quantity": 1, "max_quantity": 20},
    "Suspension Components": {"price_per_unit": 28.50, "unit": "piece", "category": "automotive", "description": "Control arms, springs, and other suspension parts", "min_quantity": 1, "max_quantity": 50},
    "Engine Components": {"price_per_unit": 35.75, "unit": "piece", "category": "automotive", "description": "Valve covers, intake manifolds, and brackets", "min_quantity": 1, "max_quantity": 30},
    "Body Panels": {"price_per_unit": 55.00, "unit": "panel", "category": "automotive", "description": "Custom automotive body panels and trim pieces", "min_quantity": 1, "max_quantity": 25},
    # Industrial
    "Heavy Machinery Parts": {"price_per_unit": 65.00, "unit": "piece", "category": "industrial", "description": "Large industrial equipment components", "min_quantity": 1, "max_quantity": 40},
    "Industrial Shelving": {"price_per_unit": 42.50, "unit": "section", "category": "industrial", "description": "Heavy-duty storage and shelving units", "min_quantity": 2, "max_quantity": 100},
    "Machine Guards": {"price_per_unit": 38.75, "unit": "piece", "category": "industrial", "description": "Safety guards for industrial machinery", "min_quantity": 1, "max_quantity": 50},
    "Tool Frames": {"price_per_unit": 32.00, "unit": "frame", "category": "industrial", "description": "Frames and housings for industrial tools", "min_quantity": 1, "max_quantity": 75},
    # Commercial
    "Store Fixtures": {"price_per_unit": 48.50, "unit": "piece", "category": "commercial", "description": "Retail display and fixture components", "min_quantity": 2, "max_quantity": 60},
    "Sign Components": {"price_per_unit": 36.25, "unit": "sq ft", "category": "commercial", "description": "Commercial signage and display parts", "min_quantity": 4, "max_quantity": 200},
    "Restaurant Equipment": {"price_per_unit": 52.75, "unit": "piece", "category": "commercial", "description": "Food service equipment components", "min_quantity": 1, "max_quantity": 40},
    # Architectural
    "Railing Systems": {"price_per_unit": 42.00, "unit": "linear ft", "category": "architectural", "description": "Decorative and functional railings", "min_quantity": 4, "max_quantity": 100},
    "Window Frames": {"price_per_unit": 38.50, "unit": "frame", "category": "architectural", "description": "Aluminum window frames and components", "min_quantity": 1, "max_quantity": 50},
    "Door Hardware": {"price_per_unit": 28.75, "unit": "piece", "category": "architectural", "description": "Door handles, hinges, and accessories", "min_quantity": 2, "max_quantity": 150},
    "Structural Elements": {"price_per_unit": 45.50, "unit": "piece", "category": "architectural", "description": "Support brackets and structural components", "min_quantity": 1, "max_quantity": 50},
}

# Coating types and their price multipliers relative to standard powder coat
COATING_TYPES = [
    {"id": "standard", "name": "Standard Powder Coating", "multiplier": 1.0},
    {"id": "premium", "name": "Premium Powder Coating", "multiplier": 1.3},
    {"id": "high-durability", "name": "High Durability Coating", "multiplier": 1.5},
    {"id": "custom", "name": "Custom Coating", "multiplier": 1.8},
]

COATING_COLORS = ["Gloss Black", "Matte Black", "Gloss White", "Matte White", "Silver", "Bronze", "Custom Color"]
COATING_FINISHES = ["Smooth", "Textured", "Metallic", "Candy", "Chrome-like"]


def seed_materials(db: Session) -> int:
    """Insert any default materials that are missing. Returns count added."""
    seeded = 0
    for name, data in DEFAULT_MATERIALS.items():
        existing = db.query(models.Material).filter(models.Material.name == name).first()
        if not existing:
            db.add(models.Material(name=name, **data))
            seeded += 1
    db.commit()
    return seeded


@router.get("/seed")
def seed(db: Session = Depends(get_db), admin: models.User = Depends(require_admin)):
    """Seed the default catalog. Safe to run multiple times: skips existing."""
    seeded = seed_materials(db)
    logger.info(f"Seeded {seeded} materials")
    return {"ok": True, "seeded": seeded}


@router.get("/", response_model=List[schemas.Material])
def list_materials(category: str = None, db: Session = Depends(get_db)):
    query = db.query(models.Material)
    if category:
        query = query.filter(models.Material.category == category)
    return query.order_by(models.Material.category, models.Material.name).all()


@router.get("/categories")
def list_categories():
    return MATERIAL_CATEGORIES


@router.get("/coating-types")
def list_coating_types():
    return {
        "types": COATING_TYPES,
        "colors": COATING_COLORS,
        "finishes": COATING_FINISHES,
    }


@router.patch("/{material_id}", response_model=schemas.Material)
def update_material(
    material_id: int,
    update: schemas.MaterialUpdate,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
):
    material = db.query(models.Material).filter(models.Material.id == material_id).first()
    if not material:
        raise HTTPException(status_code=404, detail="Material not found: run /materials/seed first")
    for field, value in update.model_dump(exclude_unset=True).items():
        setattr(material, field, value)
    db.commit()
    db.refresh(material)
    return material

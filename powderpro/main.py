from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from .config import settings
from .database import engine, Base
from .price_calculator import PriceOutOfRange
from .routers import auth, contact, materials, pdf, pricing, quotes

logger = logging.getLogger("powderpro")

# Create tables
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="PowderPro Quoting API",
    description="Powder coating price estimates, quotes and contact relay",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router, prefix="/api")
app.include_router(pricing.router, prefix="/api")
app.include_router(quotes.router, prefix="/api")
app.include_router(pdf.router, prefix="/api")
app.include_router(materials.router, prefix="/api")
app.include_router(contact.router, prefix="/api")


@app.exception_handler(PriceOutOfRange)
async def price_out_of_range_handler(request: Request, exc: PriceOutOfRange):
    """An amount overflowed while pricing: reject the input with 422."""
    logger.warning(f"Rejected {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=422, content={"detail": "Dimensions or prices are too large to quote"})


@app.get("/api/health")
def health():
    return {"status": "healthy", "app": "powderpro", "company": settings.COMPANY_NAME}


@app.on_event("startup")
def auto_seed():
    """Seed the material catalog on first run."""
    from .database import SessionLocal
    from .routers.materials import seed_materials
    db = SessionLocal()
    try:
        seeded = seed_materials(db)
        if seeded:
            logger.info(f"Seeded {seeded} default materials")
    finally:
        db.close()

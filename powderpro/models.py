from sqlalchemy import Column, Integer, String, Float, DateTime, Text, ForeignKey, Enum, Boolean, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
from .database import Base
from .quote_status import QuoteStatus


class UserRole:
    CUSTOMER = "customer"
    ADMIN = "admin"


class User(Base):
    """Customer and admin accounts."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(String, default=UserRole.CUSTOMER)  # 'customer' | 'admin'
    is_verified = Column(Boolean, default=False)
    display_name = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    company = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    auth_tokens = relationship("AuthToken", back_populates="user", cascade="all, delete-orphan")
    quotes = relationship("Quote", back_populates="user")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class AuthToken(Base):
    """JWT refresh token storage: access tokens are stateless."""
    __tablename__ = "auth_tokens"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    token_hash = Column(String, nullable=False)
    token_type = Column(String, default="refresh")
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="auth_tokens")


class Quote(Base):
    __tablename__ = "quotes"

    id = Column(Integer, primary_key=True, index=True)
    quote_number = Column(String, unique=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    status = Column(Enum(QuoteStatus), default=QuoteStatus.PENDING)

    # Coating selection
    coating_type = Column(String, nullable=False)
    coating_color = Column(String, nullable=False)
    coating_finish = Column(String, nullable=False)

    additional_services = Column(JSON, default=dict)  # {sandblasting: bool, priming: bool}
    promo_code = Column(String, nullable=True)

    # Contact info
    contact_name = Column(String, nullable=False)
    contact_email = Column(String, nullable=False)
    contact_phone = Column(String, nullable=False)
    contact_notes = Column(Text, nullable=True)

    # Totals: always recomputed server-side
    subtotal = Column(Float, default=0.0)
    services_total = Column(Float, default=0.0)
    discount_percent = Column(Float, default=0.0)
    discount_amount = Column(Float, default=0.0)
    total = Column(Float, default=0.0)

    tracking_number = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    updated_by = Column(String, nullable=True)

    user = relationship("User", back_populates="quotes")
    items = relationship(
        "QuoteItem", back_populates="quote", cascade="all, delete-orphan", order_by="QuoteItem.id",
    )


class QuoteItem(Base):
    __tablename__ = "quote_items"

    id = Column(Integer, primary_key=True, index=True)
    quote_id = Column(Integer, ForeignKey("quotes.id"))
    item_type = Column(String, nullable=False)
    size = Column(String, nullable=True)
    description = Column(String, nullable=True)
    quantity = Column(Integer, default=1)
    price = Column(Float, default=0.0)  # unit price

    # Dimensions (inches): optional, used to price the item when no price given
    height = Column(Float, nullable=True)
    width = Column(Float, nullable=True)
    depth = Column(Float, nullable=True)
    surface_area = Column(Float, nullable=True)

    line_total = Column(Float, default=0.0)

    quote = relationship("Quote", back_populates="items")


class Material(Base):
    """Catalog of common item categories with a per-unit coating price."""
    __tablename__ = "materials"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    price_per_unit = Column(Float, nullable=False)
    unit = Column(String, default="piece")
    category = Column(String, nullable=True)
    description = Column(String, nullable=True)
    min_quantity = Column(Integer, nullable=True)
    max_quantity = Column(Integer, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class PricingConfigChange(Base):
    """Audit trail of admin edits to the pricing configuration."""
    __tablename__ = "pricing_config_changes"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    user_email = Column(String, nullable=True)
    action = Column(String, default="update")  # 'update' | 'reset'
    changes = Column(JSON, default=dict)
    previous_values = Column(JSON, default=dict)
    created_at = Column(DateTime, default=datetime.utcnow)

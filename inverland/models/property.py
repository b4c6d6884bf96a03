"""
Property Model

Property listings for sale and rent.
"""
import enum
from typing import List, Optional
from pydantic import model_validator

from .base import ActivityLog, Document


class OperationType(str, enum.Enum):
    """Offering type"""
    SALE = "Venta"
    RENT = "Renta"
    TEMPORARY_RENT = "Renta temporal"


class PropertyType(str, enum.Enum):
    """Property types offered by the agency"""
    HOUSE = "Casa"
    APARTMENT = "Departamento"
    LAND = "Terreno"
    OFFICE = "Oficina"
    RETAIL = "Local comercial"
    WAREHOUSE = "Bodega"


class Property(Document):
    """Property listing"""

    # ==================== DESCRIPTION ====================
    title: str
    description: str = ''
    type: str = PropertyType.HOUSE.value
    operation_type: OperationType = OperationType.SALE

    # ==================== PRICING ====================
    price: float = 0
    rent_price: Optional[float] = None
    show_price: bool = True
    maintenance_fee: Optional[float] = None

    # ==================== SPECIFICATIONS ====================
    bedrooms: Optional[int] = None
    bathrooms: Optional[float] = None
    half_bathrooms: Optional[int] = None
    parking_spaces: Optional[int] = None
    construction_area: Optional[float] = None  # m2
    land_area: Optional[float] = None  # m2
    land_depth: Optional[float] = None
    land_front: Optional[float] = None
    construction_year: Optional[int] = None
    floor_number: Optional[int] = None
    building_floors: Optional[int] = None

    # Internal references
    internal_key: Optional[str] = None
    key_locker_code: Optional[str] = None

    # ==================== ADDRESS ====================
    street: Optional[str] = None
    street_number: Optional[str] = None
    interior_number: Optional[str] = None
    cross_street: Optional[str] = None
    neighborhood: Optional[str] = None
    zip_code: Optional[str] = None
    city: str = ''
    state: str = ''
    location: str = ''
    lat: Optional[float] = None
    lng: Optional[float] = None

    # ==================== MEDIA ====================
    amenities: List[str] = []
    images: List[str] = []
    videos: List[str] = []
    main_photo_index: Optional[int] = None

    # ==================== ASSIGNMENT ====================
    agent_id: Optional[str] = None
    client_id: Optional[str] = None

    activity_log: List[ActivityLog] = []

    @model_validator(mode='after')
    def _check_listing(self):
        if not self.location:
            self.location = ', '.join(part for part in (self.city, self.state) if part)
        if self.main_photo_index is not None:
            if not 0 <= self.main_photo_index < len(self.images):
                raise ValueError(
                    f'mainPhotoIndex {self.main_photo_index} is out of range '
                    f'for {len(self.images)} image(s)'
                )
        return self

    @property
    def is_rental(self) -> bool:
        return self.operation_type != OperationType.SALE

    @property
    def listing_price(self) -> float:
        """Price shown for the listing's operation type"""
        if self.is_rental and self.rent_price is not None:
            return self.rent_price
        return self.price

    @property
    def public_price(self) -> Optional[float]:
        return self.listing_price if self.show_price else None

    @property
    def main_photo(self) -> Optional[str]:
        if not self.images:
            return None
        return self.images[self.main_photo_index or 0]

    def to_public_dict(self) -> dict:
        """Listing card data for unauthenticated visitors"""
        data = self.to_dict()
        for key in ('internalKey', 'keyLockerCode', 'activityLog', 'clientId'):
            data.pop(key, None)
        data['publicPrice'] = self.public_price
        data['mainPhoto'] = self.main_photo
        if not self.show_price:
            data['price'] = None
            data['rentPrice'] = None
        return data

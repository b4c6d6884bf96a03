"""
Listing filters and pagination
"""
import math
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

from inverland.models import Property


def _number(value) -> Optional[float]:
    """Parse a numeric filter; blank values mean 'no filter'"""
    if value is None or value == '':
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass
class PropertyFilters:
    """Listing search filters. Unset fields do not filter."""
    type: Optional[str] = None
    location: Optional[str] = None
    operation_type: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    bedrooms: Optional[float] = None  # minimum
    bathrooms: Optional[float] = None  # minimum
    amenities: List[str] = field(default_factory=list)
    agent_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PropertyFilters':
        """Build from query parameters (camelCase or snake_case)"""
        def pick(*keys):
            for key in keys:
                if data.get(key) not in (None, ''):
                    return data[key]
            return None

        amenities = data.get('amenities') or []
        if isinstance(amenities, str):
            amenities = [a.strip() for a in amenities.split(',') if a.strip()]

        return cls(
            type=pick('type'),
            location=pick('location'),
            operation_type=pick('operationType', 'operation_type'),
            min_price=_number(pick('minPrice', 'min_price')),
            max_price=_number(pick('maxPrice', 'max_price')),
            bedrooms=_number(pick('bedrooms')),
            bathrooms=_number(pick('bathrooms')),
            amenities=list(amenities),
            agent_id=pick('agentId', 'agent_id'),
        )

    def matches(self, prop: Property) -> bool:
        if self.type and prop.type.lower() != self.type.lower():
            return False
        if self.location:
            needle = self.location.lower()
            haystack = [prop.location, prop.city, prop.state, prop.neighborhood or '']
            if not any(needle in part.lower() for part in haystack):
                return False
        if self.operation_type and prop.operation_type.value != self.operation_type:
            return False
        if self.min_price is not None and prop.listing_price < self.min_price:
            return False
        if self.max_price is not None and prop.listing_price > self.max_price:
            return False
        if self.bedrooms is not None and (prop.bedrooms or 0) < self.bedrooms:
            return False
        if self.bathrooms is not None and (prop.bathrooms or 0) < self.bathrooms:
            return False
        if self.amenities and not all(a in prop.amenities for a in self.amenities):
            return False
        if self.agent_id and prop.agent_id != self.agent_id:
            return False
        return True

    def apply(self, properties: List[Property]) -> List[Property]:
        return [prop for prop in properties if self.matches(prop)]

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v not in (None, [])}


@dataclass
class Page:
    """One page of results"""
    items: List[Any]
    page: int
    per_page: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.per_page) if self.per_page else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    def to_dict(self, serialize=None) -> Dict[str, Any]:
        serialize = serialize or (lambda item: item.to_dict())
        return {
            'items': [serialize(item) for item in self.items],
            'page': self.page,
            'per_page': self.per_page,
            'total': self.total,
            'total_pages': self.total_pages,
        }


def paginate(items: List[Any], page: int = 1, per_page: int = 9) -> Page:
    """Slice a result list; pages below 1 clamp to the first page"""
    page = max(1, int(page or 1))
    per_page = max(1, int(per_page or 1))
    start = (page - 1) * per_page
    return Page(items=items[start:start + per_page], page=page, per_page=per_page, total=len(items))

from dataclasses import dataclass
from typing import Tuple, Dict

from .domain import Amenity

DEFAULT_ICON = "check"
DEFAULT_COLOR = "#6c757d"

AMENITY_LABELS: Dict[str, str] = {
    'WI_FI': 'Wi-fi grátis',
    'PARKING': 'Estacionamento',
    'POOL': 'Piscina',
    'RESTAURANT': 'Restaurante',
    'FITNESS_CENTER': 'Academia',
    'ROOM_SERVICE': 'Serviço de quarto',
    'STEAM_ROOM': 'Sauna',
    'PET_FRIENDLY': 'Aceita pets',
    'BAR': 'Bar',
    'SPA': 'Spa',
    'ACCESSIBILITY': 'Acessibilidade',
    'AIR_CONDITIONING': 'Ar-condicionado',
}

AMENITY_ICONS: Dict[str, str] = {
    'WI_FI': 'wifi',
    'PARKING': 'local_parking',
    'POOL': 'pool',
    'RESTAURANT': 'restaurant',
    'FITNESS_CENTER': 'fitness_center',
    'ROOM_SERVICE': 'room_service',
    'STEAM_ROOM': 'hot_tub',
    'PET_FRIENDLY': 'pets',
    'BAR': 'local_bar',
    'SPA': 'spa',
    'ACCESSIBILITY': 'accessible',
    'AIR_CONDITIONING': 'ac_unit',
}

AMENITY_COLORS: Dict[str, str] = {
    'WI_FI': '#007bff',
    'PARKING': '#28a745',
    'POOL': '#17a2b8',
    'RESTAURANT': '#fd7e14',
    'FITNESS_CENTER': '#e83e8c',
    'ROOM_SERVICE': '#6f42c1',
    'STEAM_ROOM': '#20c997',
    'PET_FRIENDLY': '#ffc107',
    'BAR': '#dc3545',
    'SPA': '#6f42c1',
    'ACCESSIBILITY': '#20c997',
    'AIR_CONDITIONING': '#17a2b8',
}


@dataclass(frozen=True)
class AmenityView:
    key: str
    label: str
    icon: str
    color: str


def describe_amenity(key: str, catalog: Tuple[Amenity, ...] = ()) -> AmenityView:
    """Label, icon and color for an amenity key; unknown keys get the defaults."""
    label = next((a.label for a in catalog if a.key == key), None)
    return AmenityView(
        key=key,
        label=label or AMENITY_LABELS.get(key, key),
        icon=AMENITY_ICONS.get(key, DEFAULT_ICON),
        color=AMENITY_COLORS.get(key, DEFAULT_COLOR)
    )


def default_catalog() -> Tuple[Amenity, ...]:
    return tuple(Amenity(key=key, label=label) for key, label in AMENITY_LABELS.items())

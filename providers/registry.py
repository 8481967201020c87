"""
Registro de proveedores de calidad del aire.
"""
from typing import Dict, Optional

from errors import ProviderError
from .cmuccdc_provider import CmuccdcProvider
from .purpleair_provider import PurpleAirProvider


def get_providers() -> Dict[str, object]:
    """
    Devuelve proveedores habilitados.
    Nota: incluye CMUCCDC (DustBoy) y PurpleAir.
    """
    providers = [CmuccdcProvider(), PurpleAirProvider()]
    return {p.provider_id: p for p in providers}


def get_provider(provider_id: str) -> Optional[object]:
    return get_providers().get(str(provider_id or "").strip().upper())


def require_provider(provider_id: str):
    provider = get_provider(provider_id)
    if provider is None:
        raise ProviderError(f"Proveedor desconocido: {provider_id}")
    return provider

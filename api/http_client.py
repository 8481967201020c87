"""
Cliente HTTP con reintentos para las APIs de calidad del aire
"""
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from config import MAX_RETRIES, RETRY_DELAY_MS, TIMEOUT_SECONDS
from errors import Cancelled, FetchExhausted

logger = logging.getLogger(__name__)


class EmptyPayload(ValueError):
    """Respuesta 2xx sin contenido útil."""


@dataclass(frozen=True)
class RetryPolicy:
    """Reintentos acotados: máximo de intentos, espera fija y timeout por intento."""
    max_retries: int = MAX_RETRIES
    retry_delay_s: float = RETRY_DELAY_MS / 1000.0
    timeout_s: float = TIMEOUT_SECONDS

    def __post_init__(self):
        if self.max_retries < 1:
            raise ValueError("max_retries debe ser >= 1")
        if self.retry_delay_s < 0:
            raise ValueError("retry_delay_s no puede ser negativo")
        if self.timeout_s <= 0:
            raise ValueError("timeout_s debe ser > 0")


def _remaining(deadline: Optional[float]) -> Optional[float]:
    if deadline is None:
        return None
    return deadline - time.monotonic()


def check_cancelled(cancel_event: Optional[threading.Event], deadline: Optional[float]) -> None:
    """Lanza Cancelled si el evento está activo o el plazo ha vencido."""
    if cancel_event is not None and cancel_event.is_set():
        raise Cancelled()
    remaining = _remaining(deadline)
    if remaining is not None and remaining <= 0:
        raise Cancelled("Plazo de resolución agotado")


def _wait(delay_s: float, cancel_event: Optional[threading.Event], deadline: Optional[float]) -> None:
    """Espera entre intentos; se interrumpe si se cancela o vence el plazo."""
    remaining = _remaining(deadline)
    expires = remaining is not None and remaining < delay_s
    if expires:
        delay_s = max(0.0, remaining)
    if cancel_event is not None:
        cancel_event.wait(delay_s)
    elif delay_s > 0:
        time.sleep(delay_s)
    if expires:
        raise Cancelled("Plazo de resolución agotado")
    check_cancelled(cancel_event, deadline)


def fetch_json(
    url: str,
    params: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
    *,
    policy: Optional[RetryPolicy] = None,
    session: Optional[requests.Session] = None,
    cancel_event: Optional[threading.Event] = None,
    deadline: Optional[float] = None,
) -> Any:
    """
    GET con timeout por intento y reintentos con espera

    Cuenta como fallo: error de red, estado no 2xx, JSON inválido o vacío.

    Args:
        url: Endpoint
        params, headers: Query string y cabeceras
        policy: Política de reintentos (por defecto la de config)
        session: Transporte; si es None se usa requests directamente
        cancel_event: Evento que aborta la espera entre intentos
        deadline: Instante límite según time.monotonic()
    Returns:
        JSON decodificado
    Raises:
        FetchExhausted: tras agotar los intentos
        Cancelled: si se cancela o vence el plazo
    """
    policy = policy or RetryPolicy()
    getter = session.get if session is not None else requests.get
    last_exc: Optional[BaseException] = None

    for attempt in range(1, policy.max_retries + 1):
        check_cancelled(cancel_event, deadline)

        timeout = policy.timeout_s
        remaining = _remaining(deadline)
        if remaining is not None:
            timeout = min(timeout, remaining)

        try:
            logger.info(f"GET {url} (intento {attempt}/{policy.max_retries})")
            response = getter(url, params=params or {}, headers=headers or {}, timeout=timeout)
            response.raise_for_status()
            payload = response.json()
            if not payload:
                raise EmptyPayload(f"Respuesta vacía de {url}")
            return payload
        except (requests.RequestException, ValueError) as exc:
            last_exc = exc
            logger.warning(f"Intento {attempt}/{policy.max_retries} fallido para {url}: {exc}")
            if attempt < policy.max_retries:
                _wait(policy.retry_delay_s, cancel_event, deadline)

    raise FetchExhausted(last_exc, policy.max_retries)

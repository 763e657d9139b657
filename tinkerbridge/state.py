# estado compartido del puente (se construye una vez en el arranque)

from __future__ import annotations
import threading
from typing import Any
from dataclasses import dataclass, field

from tinkerbridge.config import Settings

@dataclass
class BridgeState:
    """
    Contexto del puente, pasado explícitamente al tick de sondeo y al worker de entrada:
    - settings: configuración inmutable
    - driver: sesión Selenium apuntando a Tinkercad
    - mqtt: cliente paho conectado (o reconectando) al broker
    - last_snapshot: último texto completo de la página ya procesado
    - browser_lock: serializa el uso del driver (el frame activo es estado del driver)
    """
    settings: Settings
    driver: Any = None
    mqtt: Any = None
    last_snapshot: str = ""
    browser_lock: threading.Lock = field(default_factory=threading.Lock)

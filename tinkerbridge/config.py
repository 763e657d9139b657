from __future__ import annotations
import os
import sys
from pathlib import Path
from dataclasses import dataclass
from dotenv import load_dotenv

USAGE = 'Usage: python mqtt_bridge.py "<tinkercad-url>" [broker] [port]'

def _getenv_bool(name: str, default: bool) -> bool:
    v = os.getenv(name, str(default)).strip().lower()
    return v in ("1", "true", "yes", "y", "on")

def _getenv_int(name: str, default: int, minimum: int = 0) -> int:
    """
    Lee un entero del entorno; si no es válido avisa y usa el valor por defecto.
    """
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        print(f"[CONFIG] {name}={raw!r} no es un entero; usando {default}", file=sys.stderr)
        return default
    return max(minimum, value)

@dataclass(frozen=True)
class Settings:
    # mqtt
    MQTT_BROKER: str
    MQTT_PORT: int
    MQTT_COMMAND_TOPIC: str
    MQTT_CLIENT_ID: str
    MQTT_KEEPALIVE: int

    # serial (salida de Tinkercad)
    POLL_INTERVAL_MS: int
    TAIL_LINES: int

    # entrada (Serial Monitor)
    EDITOR_URL_MATCH: str
    INPUT_SELECTOR: str
    INPUT_STRATEGY: str
    INBOUND_QUEUE_SIZE: int

    # navegador
    SELENIUM_BROWSER: str
    CHROME_BINARY: str
    USE_WEBDRIVER_MANAGER: bool
    PAGE_LOAD_TIMEOUT: int

def load_settings() -> Settings:
    env_path = Path(__file__).resolve().parent.parent / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path)
    else:
        load_dotenv()

    MQTT_BROKER = os.getenv("MQTT_BROKER", "localhost").strip() or "localhost"
    MQTT_PORT = _getenv_int("MQTT_PORT", 1883, minimum=1)
    MQTT_COMMAND_TOPIC = os.getenv("MQTT_COMMAND_TOPIC", "sensor/command").strip() or "sensor/command"
    MQTT_CLIENT_ID = os.getenv("MQTT_CLIENT_ID", "").strip()
    MQTT_KEEPALIVE = _getenv_int("MQTT_KEEPALIVE", 60, minimum=5)

    POLL_INTERVAL_MS = _getenv_int("POLL_INTERVAL_MS", 200, minimum=10)
    TAIL_LINES = _getenv_int("TAIL_LINES", 10, minimum=1)

    EDITOR_URL_MATCH = os.getenv("EDITOR_URL_MATCH", "/editel").strip()
    INPUT_SELECTOR = os.getenv("INPUT_SELECTOR", "textarea, input[type='text']").strip()
    INPUT_STRATEGY = os.getenv("INPUT_STRATEGY", "last").strip().lower()
    INBOUND_QUEUE_SIZE = _getenv_int("INBOUND_QUEUE_SIZE", 32, minimum=1)

    SELENIUM_BROWSER = os.getenv("SELENIUM_BROWSER", "chrome").strip()
    CHROME_BINARY = os.getenv("CHROME_BINARY", "").strip()
    USE_WEBDRIVER_MANAGER = _getenv_bool("USE_WEBDRIVER_MANAGER", True)
    PAGE_LOAD_TIMEOUT = _getenv_int("PAGE_LOAD_TIMEOUT", 60, minimum=1)

    return Settings(
        MQTT_BROKER=MQTT_BROKER,
        MQTT_PORT=MQTT_PORT,
        MQTT_COMMAND_TOPIC=MQTT_COMMAND_TOPIC,
        MQTT_CLIENT_ID=MQTT_CLIENT_ID,
        MQTT_KEEPALIVE=MQTT_KEEPALIVE,
        POLL_INTERVAL_MS=POLL_INTERVAL_MS,
        TAIL_LINES=TAIL_LINES,
        EDITOR_URL_MATCH=EDITOR_URL_MATCH,
        INPUT_SELECTOR=INPUT_SELECTOR,
        INPUT_STRATEGY=INPUT_STRATEGY,
        INBOUND_QUEUE_SIZE=INBOUND_QUEUE_SIZE,
        SELENIUM_BROWSER=SELENIUM_BROWSER,
        CHROME_BINARY=CHROME_BINARY,
        USE_WEBDRIVER_MANAGER=USE_WEBDRIVER_MANAGER,
        PAGE_LOAD_TIMEOUT=PAGE_LOAD_TIMEOUT,
    )

def parse_cli(argv: list[str], settings: Settings) -> tuple[str, str, int]:
    """
    Argumentos posicionales: URL (obligatoria), broker y puerto opcionales.
    Sin URL o con un puerto no numérico: mensaje de uso y salida con código 1.
    """
    args = list(argv)
    url = args[0].strip() if args else ""
    if not url:
        print(USAGE, file=sys.stderr)
        raise SystemExit(1)

    broker = args[1].strip() if len(args) > 1 and args[1].strip() else settings.MQTT_BROKER
    port_raw = args[2].strip() if len(args) > 2 else str(settings.MQTT_PORT)
    try:
        port = int(port_raw)
    except ValueError:
        print(f"[CONFIG] Puerto no válido: {port_raw!r}", file=sys.stderr)
        print(USAGE, file=sys.stderr)
        raise SystemExit(1)
    return url, broker, port

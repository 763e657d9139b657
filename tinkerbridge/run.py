from __future__ import annotations
import sys
import time
import threading
from typing import Optional

from selenium.common.exceptions import WebDriverException

from tinkerbridge.state import BridgeState
from tinkerbridge.browser.session import launch_browser, open_simulator
from tinkerbridge.browser.snapshot import read_page_text
from tinkerbridge.serial.change import detect_change
from tinkerbridge.serial.parser import parse_snapshot
from tinkerbridge.mqtt import client as mqtt_client
from tinkerbridge.inbound.worker import InboundWorker


def poll_once(state: BridgeState) -> int:
    """Snapshot → cambio → parseo → publicación. Devuelve cuántos registros se publicaron."""
    with state.browser_lock:
        text = read_page_text(state.driver)

    if not detect_change(state, text):
        return 0

    published = 0
    for rec in parse_snapshot(text, state.settings.TAIL_LINES):
        if mqtt_client.publish_record(state.mqtt, rec):
            published += 1
    return published


class PollLoop:
    """
    Sondeo a ritmo fijo con un solo tick en vuelo.
    - tick() pedido mientras otro está en curso -> se omite (skipped)
    - plazos vencidos por un tick lento -> se agrupan, no se recuperan (coalesced)
    """
    def __init__(self, state: BridgeState, interval_ms: int = 200,
                 clock=time.monotonic):
        self.state = state
        self.period = max(0.001, interval_ms / 1000.0)
        self.clock = clock
        self.ticks = 0
        self.skipped = 0
        self.coalesced = 0
        self._in_flight = threading.Lock()

    def tick(self) -> bool:
        if not self._in_flight.acquire(blocking=False):
            self.skipped += 1
            return False
        try:
            poll_once(self.state)
        except Exception as e:
            print(f"[POLL][ERR] {e}", file=sys.stderr)
        finally:
            self.ticks += 1
            self._in_flight.release()
        return True

    def run(self, stop_event: Optional[threading.Event] = None) -> None:
        stop = stop_event or threading.Event()
        next_at = self.clock()
        while not stop.is_set():
            self.tick()
            next_at += self.period
            now = self.clock()
            if now > next_at:
                missed = int((now - next_at) // self.period) + 1
                self.coalesced += missed
                next_at += missed * self.period
            stop.wait(max(0.0, next_at - now))


def run_bridge(settings, url: str) -> int:
    print("▶ Iniciando puente Tinkercad Serial ↔ MQTT.")
    print(f"[INIT] broker={settings.MQTT_BROKER}:{settings.MQTT_PORT}  "
          f"control={settings.MQTT_COMMAND_TOPIC}  poll={settings.POLL_INTERVAL_MS} ms")

    state = BridgeState(settings=settings)
    try:
        worker = InboundWorker(state, maxsize=settings.INBOUND_QUEUE_SIZE)
    except ValueError as e:
        print(f"[CONFIG] {e}", file=sys.stderr)
        return 1

    # 1) MQTT (no fatal si el broker no está)
    state.mqtt = mqtt_client.connect(
        settings.MQTT_BROKER, settings.MQTT_PORT, settings.MQTT_COMMAND_TOPIC,
        worker.submit, client_id=settings.MQTT_CLIENT_ID, keepalive=settings.MQTT_KEEPALIVE,
    )

    # 2) Navegador (sin sesión no hay nada que puentear)
    try:
        state.driver = launch_browser(settings)
    except Exception as e:
        print(f"❌ No se pudo lanzar el navegador: {e!r}", file=sys.stderr)
        mqtt_client.close(state.mqtt)
        return 1

    # 3) Entrada (MQTT → Serial) y bucle de sondeo (Serial → MQTT)
    loop = PollLoop(state, settings.POLL_INTERVAL_MS)
    status = 0
    try:
        open_simulator(state.driver, url)
        worker.start()
        loop.run()
    except KeyboardInterrupt:
        pass
    except WebDriverException as e:
        print(f"❌ No se pudo abrir {url}: {e.msg or e!r}", file=sys.stderr)
        status = 1
    finally:
        worker.stop()
        mqtt_client.close(state.mqtt)
        try:
            state.driver.quit()
        except Exception:
            pass
        print(f"⏹ Puente detenido (ticks={loop.ticks}, agrupados={loop.coalesced}).")
    return status

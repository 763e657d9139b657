from __future__ import annotations
import sys
import queue
import threading
from dataclasses import dataclass
from typing import Optional

from tinkerbridge.inbound.router import enter_editor_context, make_resolver
from tinkerbridge.inbound.injector import inject_text


@dataclass(frozen=True)
class InboundEvent:
    topic: str
    payload: bytes

    @property
    def text(self) -> str:
        return self.payload.decode("utf-8", errors="replace")


def deliver(state, event: InboundEvent, resolver=None) -> bool:
    """
    Recibido → frame del editor → campo de entrada → inyectado.
    Si falla cualquier paso se registra y el evento se descarta (sin reintento).
    """
    settings = state.settings
    if resolver is None:
        resolver = make_resolver(settings.INPUT_STRATEGY, settings.INPUT_SELECTOR)
    msg = event.text
    print(f"← MQTT: {event.topic} {msg}")

    with state.browser_lock:
        driver = state.driver
        try:
            if not enter_editor_context(driver, settings.EDITOR_URL_MATCH):
                print("⚠️ No se encontró el frame del editor de Tinkercad.", file=sys.stderr)
                return False

            target = resolver.resolve(driver)
            if target is None:
                print("⚠️ Campo del Serial Monitor no encontrado; mantén el Serial Monitor abierto.",
                      file=sys.stderr)
                return False

            inject_text(driver, target, msg)
            print(f'↩ Enviado al Serial de Tinkercad: "{msg}"')
            return True
        except Exception as e:
            print(f"⚠️ Error enviando al Serial de Tinkercad: {e}", file=sys.stderr)
            return False
        finally:
            try:
                driver.switch_to.default_content()
            except Exception:
                pass


class InboundWorker:
    """
    Cola acotada + un único hilo que entrega los eventos de uno en uno,
    para no intercalar modificaciones del documento.
    """
    def __init__(self, state, maxsize: int = 32, resolver=None):
        self.state = state
        self.resolver = resolver or make_resolver(state.settings.INPUT_STRATEGY,
                                                  state.settings.INPUT_SELECTOR)
        self.queue: "queue.Queue[Optional[InboundEvent]]" = queue.Queue(maxsize=max(1, maxsize))
        self._thread: Optional[threading.Thread] = None

    def submit(self, topic: str, payload: bytes) -> bool:
        """Llamado desde el hilo de paho. Si la cola está llena, el evento se descarta."""
        event = InboundEvent(topic=topic, payload=payload)
        try:
            self.queue.put_nowait(event)
            return True
        except queue.Full:
            print(f"[RECV] Cola llena ({self.queue.maxsize}); descartado: {topic}", file=sys.stderr)
            return False

    def drain_once(self, timeout: Optional[float] = None) -> bool:
        """Procesa un evento. False si llegó la señal de parada (None)."""
        event = self.queue.get(timeout=timeout)
        try:
            if event is None:
                return False
            deliver(self.state, event, self.resolver)
            return True
        finally:
            self.queue.task_done()

    def _loop(self) -> None:
        while True:
            try:
                if not self.drain_once():
                    break
            except Exception as e:
                print(f"[RECV] loop error: {e}", file=sys.stderr)

    def start(self) -> None:
        self._thread = threading.Thread(target=self._loop, name="inbound-worker", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        try:
            self.queue.put_nowait(None)
        except queue.Full:
            pass  # hilo daemon: muere con el proceso

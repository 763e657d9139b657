from __future__ import annotations
import sys
from typing import Callable
import paho.mqtt.client as mqtt

from tinkerbridge.serial.parser import Record


def connect(host: str, port: int, command_topic: str,
            on_command: Callable[[str, bytes], None],
            client_id: str = "", keepalive: int = 60) -> mqtt.Client:
    """
    Crea el cliente MQTT y arranca su hilo de red.
    La conexión es asíncrona: si el broker no responde se registra el error y
    paho sigue reintentando en segundo plano (no es fatal).
    on_command(topic, payload_bytes) se invoca desde el hilo de paho.
    """
    client = mqtt.Client(mqtt.CallbackAPIVersion.VERSION2, client_id=client_id)

    def _on_connect(cl, userdata, flags, reason_code, properties):
        if reason_code.is_failure:
            print(f"[MQTT] Conexión rechazada por {host}:{port}: {reason_code}", file=sys.stderr)
            return
        print(f"✔ MQTT conectado → {host}:{port}")
        # se (re)suscribe en cada conexión
        cl.subscribe(command_topic)
        print(f"[MQTT] Escuchando: {command_topic}")

    def _on_disconnect(cl, userdata, flags, reason_code, properties):
        if reason_code.is_failure:
            print(f"[MQTT] Desconectado ({reason_code}); reintentando…", file=sys.stderr)

    def _on_message(cl, userdata, msg):
        try:
            on_command(msg.topic, bytes(msg.payload))
        except Exception as e:
            print(f"[MQTT][ERR] on_message: {e}", file=sys.stderr)

    client.on_connect = _on_connect
    client.on_disconnect = _on_disconnect
    client.on_message = _on_message

    try:
        client.connect_async(host, port, keepalive=keepalive)
    except Exception as e:
        print(f"[MQTT][ERR] No se pudo iniciar la conexión a {host}:{port}: {e}", file=sys.stderr)
    client.loop_start()
    return client


def publish_record(client, record: Record) -> bool:
    """Publica sin esperar confirmación (QoS 0). Devuelve True si paho lo aceptó."""
    print(f"→ publish: {record.topic} {record.payload}")
    try:
        info = client.publish(record.topic, record.payload)
    except Exception as e:
        # p.ej. ValueError si el topic lleva comodines '+' o '#'
        print(f"[PUB][ERR] {record.topic}: {e}", file=sys.stderr)
        return False
    if info.rc != mqtt.MQTT_ERR_SUCCESS:
        print(f"[PUB] fallo {record.topic}: {mqtt.error_string(info.rc)}", file=sys.stderr)
        return False
    return True


def close(client) -> None:
    try:
        client.loop_stop()
        client.disconnect()
    except Exception as e:
        print(f"[MQTT] Error al cerrar: {e}", file=sys.stderr)

#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# archivo principal (mínimo)
#   python mqtt_bridge.py "https://www.tinkercad.com/things/<circuito>" [broker=localhost] [port=1883]

import sys
from dataclasses import replace

from tinkerbridge.config import load_settings, parse_cli
from tinkerbridge.run import run_bridge


def main(argv=None) -> int:
    settings = load_settings()
    url, broker, port = parse_cli(sys.argv[1:] if argv is None else argv, settings)
    settings = replace(settings, MQTT_BROKER=broker, MQTT_PORT=port)
    return run_bridge(settings, url)


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        pass

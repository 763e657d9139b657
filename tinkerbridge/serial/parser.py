# texto del Serial Monitor -> registros (topic, payload)

from __future__ import annotations
import re
from typing import List, Optional
from dataclasses import dataclass

TAIL_LINES = 10

_NEWLINE = re.compile(r"\r\n|\r|\n")

@dataclass(frozen=True)
class Record:
    topic: str
    payload: str

def parse_line(line: str) -> Optional[Record]:
    """'sensor/temperature 23.5 C' -> Record('sensor/temperature', '23.5 C'). None si no hay payload."""
    parts = line.strip().split()
    if len(parts) < 2:
        return None
    return Record(topic=parts[0], payload=" ".join(parts[1:]))

def parse_snapshot(snapshot: str, tail_lines: int = TAIL_LINES) -> List[Record]:
    """
    Solo se miran las últimas `tail_lines` líneas (lo reciente está al final).
    Las líneas mal formadas se descartan sin cortar el lote; el orden se conserva.
    """
    lines = _NEWLINE.split(snapshot)[-max(1, tail_lines):]
    records: List[Record] = []
    for line in lines:
        if not line.strip():
            continue
        rec = parse_line(line)
        if rec is not None:
            records.append(rec)
    return records

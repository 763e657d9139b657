# detección de cambios entre snapshots de texto

from __future__ import annotations

def detect_change(state, snapshot: str) -> bool:
    """
    True si el snapshot es nuevo y hay que procesarlo.
    Vacío o idéntico al anterior -> False. El último snapshot se actualiza ANTES
    de parsear/publicar, así un fallo aguas abajo no provoca reprocesarlo.
    """
    if not snapshot or snapshot == state.last_snapshot:
        return False
    state.last_snapshot = snapshot
    return True

# extraer el texto visible de la página

from __future__ import annotations

_INNER_TEXT_JS = "return (document.body && document.body.innerText) || '';"

def read_page_text(driver) -> str:
    """Texto completo (innerText) del documento principal. Llamar con browser_lock tomado."""
    driver.switch_to.default_content()
    text = driver.execute_script(_INNER_TEXT_JS)
    return text if isinstance(text, str) else ""

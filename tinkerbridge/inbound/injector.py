# simular teclado/ratón sobre el campo del Serial Monitor

from __future__ import annotations

from selenium.webdriver.common.action_chains import ActionChains
from selenium.webdriver.common.keys import Keys


def inject_text(driver, element, text: str) -> None:
    """
    Triple clic (selecciona todo) → Backspace → escribir → Enter.
    Cualquier excepción de Selenium se propaga al llamador.
    """
    ActionChains(driver).click(element).click(element).click(element).perform()
    ActionChains(driver).send_keys(Keys.BACKSPACE).perform()
    element.send_keys(text)
    ActionChains(driver).send_keys(Keys.ENTER).perform()

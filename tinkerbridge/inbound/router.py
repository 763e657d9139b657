# localizar el frame del editor y el campo de entrada del Serial Monitor

from __future__ import annotations
import sys
from typing import List, Protocol

from selenium.common.exceptions import WebDriverException
from selenium.webdriver.common.by import By

_LOCATION_JS = "return window.location.href;"
_FRAME_SELECTOR = "iframe, frame"


def _current_url(driver) -> str:
    return driver.execute_script(_LOCATION_JS) or ""


def _search_frames(driver, url_match: str) -> bool:
    # recorre los frames hijos del contexto actual en orden de documento
    # un frame inaccesible (obsoleto, recargando) se omite sin abortar la búsqueda
    for frame in driver.find_elements(By.CSS_SELECTOR, _FRAME_SELECTOR):
        try:
            driver.switch_to.frame(frame)
        except WebDriverException as e:
            print(f"[SEND] frame omitido: {e.__class__.__name__}", file=sys.stderr)
            continue
        try:
            if url_match in _current_url(driver):
                return True
            if _search_frames(driver, url_match):
                return True
        except WebDriverException as e:
            print(f"[SEND] frame omitido: {e.__class__.__name__}", file=sys.stderr)
        driver.switch_to.parent_frame()
    return False


def enter_editor_context(driver, url_match: str) -> bool:
    """
    Deja el driver dentro del primer contexto (documento principal o frame,
    en profundidad) cuya URL contiene url_match. False si no existe; en ese
    caso el driver queda en el documento principal.
    """
    driver.switch_to.default_content()
    if url_match in _current_url(driver):
        return True
    if _search_frames(driver, url_match):
        return True
    driver.switch_to.default_content()
    return False


class InputResolver(Protocol):
    def resolve(self, driver): ...


class LastInputResolver:
    """El Serial Monitor suele ser el último campo de texto del DOM."""

    def __init__(self, selector: str):
        self.selector = selector

    def candidates(self, driver) -> List:
        return driver.find_elements(By.CSS_SELECTOR, self.selector)

    def resolve(self, driver):
        found = self.candidates(driver)
        return found[-1] if found else None


class FirstInputResolver(LastInputResolver):
    def resolve(self, driver):
        found = self.candidates(driver)
        return found[0] if found else None


_RESOLVERS = {
    "last": LastInputResolver,
    "first": FirstInputResolver,
}


def make_resolver(strategy: str, selector: str) -> InputResolver:
    cls = _RESOLVERS.get((strategy or "").lower())
    if cls is None:
        raise ValueError(f"INPUT_STRATEGY desconocida: {strategy!r} (usa {', '.join(_RESOLVERS)})")
    return cls(selector)

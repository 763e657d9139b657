# lanzar el navegador (visible) y abrir el circuito de Tinkercad

from __future__ import annotations
import os
import sys
import shutil
from typing import Optional

from selenium import webdriver
from selenium.common.exceptions import TimeoutException

_HIDE_WEBDRIVER_JS = "Object.defineProperty(navigator, 'webdriver', { get: () => undefined });"

_CHROME_REG_KEY = r"SOFTWARE\Microsoft\Windows\CurrentVersion\App Paths\chrome.exe"
_CHROME_NAMES = ("google-chrome", "google-chrome-stable", "chromium", "chromium-browser", "chrome")


def _chrome_from_registry() -> Optional[str]:
    if sys.platform != "win32":
        return None
    import winreg
    for hive in (winreg.HKEY_LOCAL_MACHINE, winreg.HKEY_CURRENT_USER):
        try:
            with winreg.OpenKey(hive, _CHROME_REG_KEY) as key:
                value, _ = winreg.QueryValueEx(key, "")
                if value:
                    return str(value).strip()
        except OSError:
            continue
    return None


def detect_chrome_binary(explicit: str = "") -> Optional[str]:
    """
    Orden: CHROME_BINARY → registro de Windows (App Paths) → ejecutables en PATH.
    None = que el driver use su navegador por defecto.
    """
    if explicit:
        if os.path.exists(explicit):
            return explicit
        print(f"[BROWSER] CHROME_BINARY no existe: {explicit}", file=sys.stderr)

    path = _chrome_from_registry()
    if path and os.path.exists(path):
        return path

    for name in _CHROME_NAMES:
        found = shutil.which(name)
        if found:
            return found
    return None


def launch_browser(settings):
    """
    Abre Chrome (o Edge) VISIBLE: el usuario tiene que iniciar sesión, arrancar
    la simulación y abrir el Serial Monitor a mano.
    """
    args = (
        "--start-maximized",
        "--ignore-certificate-errors",
        "--disable-blink-features=AutomationControlled",
    )

    if settings.SELENIUM_BROWSER.lower() == "edge":
        from selenium.webdriver.edge.options import Options as EdgeOptions
        from selenium.webdriver.edge.service import Service as EdgeService
        opts = EdgeOptions()
        for a in args:
            opts.add_argument(a)
        opts.add_experimental_option("excludeSwitches", ["enable-automation"])
        if settings.USE_WEBDRIVER_MANAGER:
            from webdriver_manager.microsoft import EdgeChromiumDriverManager
            driver = webdriver.Edge(service=EdgeService(EdgeChromiumDriverManager().install()), options=opts)
        else:
            driver = webdriver.Edge(options=opts)
    else:
        from selenium.webdriver.chrome.options import Options as ChromeOptions
        from selenium.webdriver.chrome.service import Service as ChromeService
        opts = ChromeOptions()
        for a in args:
            opts.add_argument(a)
        opts.add_experimental_option("excludeSwitches", ["enable-automation"])
        chrome_path = detect_chrome_binary(settings.CHROME_BINARY)
        if chrome_path:
            opts.binary_location = chrome_path
            print(f"✔ Chrome detectado: {chrome_path}")
        else:
            print("⚠️  Chrome no encontrado; se usa el navegador por defecto del driver.")
        if settings.USE_WEBDRIVER_MANAGER:
            from webdriver_manager.chrome import ChromeDriverManager
            driver = webdriver.Chrome(service=ChromeService(ChromeDriverManager().install()), options=opts)
        else:
            driver = webdriver.Chrome(options=opts)

    try:
        driver.execute_cdp_cmd("Page.addScriptToEvaluateOnNewDocument", {"source": _HIDE_WEBDRIVER_JS})
    except Exception as e:
        print(f"[BROWSER] No se pudo ocultar navigator.webdriver: {e}", file=sys.stderr)

    driver.set_page_load_timeout(settings.PAGE_LOAD_TIMEOUT)
    return driver


def open_simulator(driver, url: str) -> None:
    print("🌐 Abriendo Tinkercad...")
    try:
        driver.get(url)
    except TimeoutException:
        # la página puede seguir cargando; el usuario continúa a mano
        print("[BROWSER] Timeout de carga; se continúa igualmente.", file=sys.stderr)
    print("➡️  Inicia sesión si hace falta, pulsa **Start Simulation** y abre el **Serial Monitor**.")

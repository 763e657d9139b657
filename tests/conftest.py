# Fakes compartidos: driver Selenium, ActionChains y cliente MQTT
from types import SimpleNamespace

import paho.mqtt.client as mqtt
import pytest
from selenium.webdriver.common.keys import Keys

from tinkerbridge.config import Settings
from tinkerbridge.state import BridgeState


class FakeDoc:
    def __init__(self, url, text="", inputs=None, frames=None):
        self.url = url
        self.text = text
        self.inputs = inputs or []
        self.frames = frames or []
        self.switch_error = None
        self.url_error = None


class FakeFrameElement:
    def __init__(self, doc):
        self.doc = doc


class FakeInput:
    def __init__(self, name, value=""):
        self.name = name
        self.value = value
        self.selected_all = False
        self.submitted = []
        self.log = None
        self.fail_on_type = None

    def send_keys(self, text):
        if self.fail_on_type:
            raise self.fail_on_type
        self.value += text
        self.log.append(("type", self.name, text))


class FakeSwitchTo:
    def __init__(self, driver):
        self.driver = driver

    def default_content(self):
        self.driver.stack = [self.driver.root]

    def frame(self, element):
        if element.doc.switch_error:
            raise element.doc.switch_error
        self.driver.stack.append(element.doc)

    def parent_frame(self):
        if len(self.driver.stack) > 1:
            self.driver.stack.pop()


class FakeDriver:
    def __init__(self, root):
        self.root = root
        self.stack = [root]
        self.log = []
        self.focused = None
        self.script_error = None
        self.on_script = None
        self.switch_to = FakeSwitchTo(self)
        self._bind(root)

    def _bind(self, doc):
        for el in doc.inputs:
            el.log = self.log
        for child in doc.frames:
            self._bind(child)

    @property
    def current(self):
        return self.stack[-1]

    def execute_script(self, js):
        if self.on_script:
            self.on_script(js)
        if self.script_error:
            raise self.script_error
        if "location.href" in js:
            if self.current.url_error:
                raise self.current.url_error
            return self.current.url
        if "innerText" in js:
            return self.current.text
        return None

    def find_elements(self, by, selector):
        if "iframe" in selector:
            return [FakeFrameElement(d) for d in self.current.frames]
        return list(self.current.inputs)

    def press(self, key):
        el = self.focused
        if key == Keys.BACKSPACE:
            if el.selected_all:
                el.value = ""
                el.selected_all = False
            else:
                el.value = el.value[:-1]
            self.log.append(("key", "BACKSPACE"))
        elif key == Keys.ENTER:
            el.submitted.append(el.value)
            self.log.append(("key", "ENTER"))


class FakeActionChains:
    def __init__(self, driver):
        self.driver = driver
        self.steps = []

    def click(self, element):
        self.steps.append(("click", element))
        return self

    def send_keys(self, *keys):
        self.steps.append(("keys", "".join(keys)))
        return self

    def perform(self):
        clicks = 0
        for kind, arg in self.steps:
            if kind == "click":
                clicks += 1
                self.driver.focused = arg
                self.driver.log.append(("click", arg.name))
                if clicks == 3:
                    arg.selected_all = True
            else:
                self.driver.press(arg)


class FakeMqtt:
    def __init__(self, rc=mqtt.MQTT_ERR_SUCCESS):
        self.rc = rc
        self.published = []

    def publish(self, topic, payload):
        if "#" in topic or "+" in topic:
            raise ValueError("Publish topic cannot contain wildcards.")
        self.published.append((topic, payload))
        return SimpleNamespace(rc=self.rc)


def _settings(**overrides):
    base = dict(
        MQTT_BROKER="localhost",
        MQTT_PORT=1883,
        MQTT_COMMAND_TOPIC="sensor/command",
        MQTT_CLIENT_ID="",
        MQTT_KEEPALIVE=60,
        POLL_INTERVAL_MS=200,
        TAIL_LINES=10,
        EDITOR_URL_MATCH="/editel",
        INPUT_SELECTOR="textarea, input[type='text']",
        INPUT_STRATEGY="last",
        INBOUND_QUEUE_SIZE=32,
        SELENIUM_BROWSER="chrome",
        CHROME_BINARY="",
        USE_WEBDRIVER_MANAGER=True,
        PAGE_LOAD_TIMEOUT=60,
    )
    base.update(overrides)
    return Settings(**base)


@pytest.fixture
def make_settings():
    return _settings


@pytest.fixture
def fake_actions(monkeypatch):
    monkeypatch.setattr("tinkerbridge.inbound.injector.ActionChains", FakeActionChains)
    return FakeActionChains


@pytest.fixture
def editor_page():
    """Página de Tinkercad: un iframe de anuncios y el iframe del editor con dos campos."""
    search = FakeInput("search", "circuit")
    serial = FakeInput("serial", "old text")
    editor = FakeDoc("https://www.tinkercad.com/things/abc-blink/editel?tenant=circuits",
                     inputs=[search, serial])
    ads = FakeDoc("https://ads.example.com/frame")
    root = FakeDoc("https://www.tinkercad.com/things/abc-blink", text="", frames=[ads, editor])
    driver = FakeDriver(root)
    return SimpleNamespace(driver=driver, root=root, editor=editor, search=search, serial=serial)


@pytest.fixture
def state(make_settings):
    def _build(driver, mqtt_client=None, **overrides):
        return BridgeState(settings=make_settings(**overrides), driver=driver,
                           mqtt=mqtt_client if mqtt_client is not None else FakeMqtt())
    return _build

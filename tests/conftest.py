import logging
import threading

import pytest

from mac_grabber.executor import MainContext


class FakeClipboard:
    def __init__(self, text="", image=None, error=None):
        self.text = text
        self.image = image
        self.error = error
        self.image_reads = 0

    def set_string(self, text):
        self.text = text

    def get_string(self):
        return self.text

    def clear(self):
        self.text = ""
        self.image = None

    def read_image(self):
        self.image_reads += 1
        if self.error is not None:
            raise self.error
        return self.image


class FakeProcess:
    def __init__(self, returncode=0, hold=False):
        self.pid = 4242
        self.returncode = returncode
        self.terminated = False
        self._done = threading.Event()
        if not hold:
            self._done.set()

    def wait(self, timeout=None):
        self._done.wait(timeout)
        return self.returncode

    def finish(self, returncode=0):
        self.returncode = returncode
        self._done.set()

    def terminate(self):
        self.terminated = True
        self.returncode = -15
        self._done.set()


class FakeSpawner:
    def __init__(self, returncode=0, hold=False, error=None):
        self.returncode = returncode
        self.hold = hold
        self.error = error
        self.calls = []
        self.processes = []

    def __call__(self, argv, **kwargs):
        self.calls.append((list(argv), kwargs))
        if self.error is not None:
            raise self.error
        process = FakeProcess(self.returncode, hold=self.hold)
        self.processes.append(process)
        return process


@pytest.fixture
def main_context():
    context = MainContext(name="test-main")
    yield context
    context.close()


@pytest.fixture
def clipboard():
    return FakeClipboard()


@pytest.fixture(autouse=True)
def _restore_package_logger():
    logger = logging.getLogger("mac_grabber")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
    logger.setLevel(level)
    logger.propagate = True


@pytest.fixture
def make_spawner():
    return FakeSpawner


@pytest.fixture
def make_clipboard():
    return FakeClipboard

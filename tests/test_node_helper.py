import asyncio
import threading

from core.document import Document
from core.file_loader import FileLoader, LoadedFileRegistry
from core.models import ModuleDescriptor
from core.module import Module, ModuleContext
from core.node_helper import NodeHelper
from core.translator import Translator


class CountingHelper(NodeHelper):
    notification = "COUNT"

    def __init__(self, module, bus, config):
        super().__init__(module, bus, config)
        self.count = 0

    def fetch(self):
        self.count += 1
        if self.count == 2:
            raise RuntimeError("flaky upstream")
        return {"count": self.count}


class Counter(Module):
    name = "counter"
    defaults = {"update_interval": 0.01}
    helper_class = CountingHelper

    def __init__(self):
        super().__init__()
        self.payloads = []
        self.got_two = threading.Event()

    def socket_notification_received(self, notification, payload):
        self.payloads.append((notification, payload))
        if len(self.payloads) >= 2:
            self.got_two.set()


def test_start_spawns_helper_that_survives_fetch_errors(tmp_path, bus):
    published = []
    bus.subscribe("COUNT", lambda n, p, s: published.append(s))

    module = Counter()
    module.set_context(ModuleContext(
        FileLoader(Document(str(tmp_path)), LoadedFileRegistry()), Translator(), bus,
    ))
    module.set_descriptor(ModuleDescriptor(
        index=1, module_class="counter", identifier="module_1_counter",
        name="counter", path="modules/counter/", file="counter.py",
    ))
    module.set_config({})

    asyncio.run(module.start())
    try:
        assert module.got_two.wait(timeout=5)
        assert module.helper.running
    finally:
        helper = module.helper
        module.stop()

    assert module.helper is None
    assert not helper.running
    assert module.payloads[0] == ("COUNT", {"count": 1})
    assert module.payloads[1] == ("COUNT", {"count": 3})
    assert published[0] == "module_1_counter.helper"

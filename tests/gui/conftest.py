import gc

import pytest
from PyQt6 import sip
from PyQt6.QtWidgets import QApplication


@pytest.fixture(autouse=True)
def _enforce_widget_cleanup():
    """Error if a test leaks timescope.* widgets without cleanup.

    Defined first in conftest.py so it tears down last (LIFO), after
    _flush_qt_events has already processed deferred events and GC'd.
    Only flags top-level widgets (parent=None) from timescope.* modules
    that are still visible.
    """
    app = QApplication.instance()
    if app is None:
        yield
        return

    before = set(id(w) for w in app.allWidgets())
    yield

    gc.collect()
    app.processEvents()
    app.processEvents()

    leaked = [
        w for w in app.allWidgets()
        if id(w) not in before
        and w.parent() is None
        and not sip.isdeleted(w)
        and type(w).__module__.startswith("timescope.")
        and w.isVisible()
    ]
    if leaked:
        names = [type(w).__name__ for w in leaked]
        for w in leaked:
            try:
                w.close()
                w.deleteLater()
            except RuntimeError:
                pass
        app.processEvents()
        pytest.fail(
            f"Leaked {len(leaked)} widget(s) without cleanup: {names}. "
            "Add qtbot.addWidget(w) and close/deleteLater/processEvents "
            "in fixture teardown.",
            pytrace=False,
        )


@pytest.fixture(autouse=True)
def _flush_qt_events():
    """Flush deferred Qt events between tests.

    Widgets use deleteLater() which schedules work for the next event-loop
    iteration; two processEvents passes drain it before the next test.
    """
    yield
    app = QApplication.instance()
    if app is None:
        return
    app.processEvents()
    gc.collect()
    app.processEvents()

import threading

from netmon.core.state import AvailabilityCell


def test_cell_defaults_available():
    assert AvailabilityCell().get() is True


def test_set_reports_change():
    cell = AvailabilityCell()
    assert cell.set(False) is True
    assert cell.set(False) is False
    assert cell.get() is False
    assert cell.set(True) is True


def test_writer_thread_is_visible_to_reader():
    cell = AvailabilityCell()
    t = threading.Thread(target=cell.set, args=(False,))
    t.start()
    t.join()
    assert cell.get() is False

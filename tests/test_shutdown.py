import threading
from concurrent.futures import ThreadPoolExecutor

from kvserver.services.shutdown import ShutdownSignal


def test_fire_is_idempotent():
    signal = ShutdownSignal()
    assert not signal.is_fired
    assert signal.fire() is True
    assert signal.fire() is False
    assert signal.is_fired


def test_wait_times_out_until_fired():
    signal = ShutdownSignal()
    assert signal.wait(0.01) is False
    signal.fire()
    assert signal.wait(0.01) is True
    assert signal.wait() is True


def test_fire_wakes_all_waiters():
    signal = ShutdownSignal()
    woken = []

    def waiter():
        woken.append(signal.wait(5))

    threads = [threading.Thread(target=waiter) for _ in range(4)]
    for t in threads:
        t.start()
    signal.fire()
    for t in threads:
        t.join(5)
    assert woken == [True, True, True, True]


def test_concurrent_fire_transitions_once():
    signal = ShutdownSignal()
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: signal.fire(), range(50)))
    assert results.count(True) == 1
    assert signal.is_fired

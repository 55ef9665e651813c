import threading

from mac_grabber.capture import CaptureStatus, ScreenCaptureInvoker
from mac_grabber.config import Settings
from mac_grabber.executor import CancellationToken


def make_invoker(clipboard, main_context, spawner):
    return ScreenCaptureInvoker(clipboard, main_context, Settings(), spawn=spawner)


def test_spawns_screencapture_with_clipboard_interactive_silent_flags(clipboard, main_context, make_spawner):
    spawner = make_spawner()
    make_invoker(clipboard, main_context, spawner).capture_selection_to_clipboard().result(timeout=5)
    argv, kwargs = spawner.calls[0]
    assert argv == ["/usr/sbin/screencapture", "-c", "-i", "-x"]


def test_completion_receives_image_from_clipboard(make_clipboard, main_context, make_spawner):
    image = object()
    received = []
    invoker = make_invoker(make_clipboard(image=image), main_context, make_spawner())

    outcome = invoker.capture_selection_to_clipboard(received.append).result(timeout=5)

    assert outcome.status is CaptureStatus.CAPTURED
    assert outcome.image is image
    assert received == [image]


def test_completion_receives_none_when_clipboard_has_no_image(clipboard, main_context, make_spawner):
    received = []
    invoker = make_invoker(clipboard, main_context, make_spawner(returncode=1))

    outcome = invoker.capture_selection_to_clipboard(received.append).result(timeout=5)

    assert outcome.status is CaptureStatus.EMPTY
    assert outcome.image is None
    assert outcome.returncode == 1
    assert received == [None]


def test_completion_runs_on_main_context(clipboard, main_context, make_spawner):
    threads = []
    invoker = make_invoker(clipboard, main_context, make_spawner())
    invoker.capture_selection_to_clipboard(
        lambda image: threads.append(threading.current_thread().name)
    ).result(timeout=5)
    assert threads[0].startswith("test-main")


def test_spawn_failure_resolves_failed(clipboard, main_context, make_spawner):
    received = []
    invoker = make_invoker(clipboard, main_context, make_spawner(error=FileNotFoundError("screencapture")))

    outcome = invoker.capture_selection_to_clipboard(received.append).result(timeout=5)

    assert outcome.status is CaptureStatus.FAILED
    assert received == [None]
    assert clipboard.image_reads == 0


def test_clipboard_read_error_resolves_failed(make_clipboard, main_context, make_spawner):
    clipboard = make_clipboard(error=OSError("pasteboard unavailable"))
    invoker = make_invoker(clipboard, main_context, make_spawner())
    outcome = invoker.capture_selection_to_clipboard().result(timeout=5)
    assert outcome.status is CaptureStatus.FAILED
    assert outcome.image is None


def test_cancelling_terminates_the_utility(make_clipboard, main_context, make_spawner):
    clipboard = make_clipboard(image=object())
    spawner = make_spawner(hold=True)
    token = CancellationToken()
    received = []
    future = make_invoker(clipboard, main_context, spawner).capture_selection_to_clipboard(
        received.append, token=token
    )

    token.cancel()
    outcome = future.result(timeout=5)

    assert spawner.processes[0].terminated
    assert outcome.status is CaptureStatus.CANCELLED
    assert outcome.image is None
    assert received == [None]
    assert clipboard.image_reads == 0


def test_already_cancelled_token_skips_the_utility(clipboard, main_context, make_spawner):
    spawner = make_spawner()
    token = CancellationToken()
    token.cancel()
    outcome = make_invoker(clipboard, main_context, spawner).capture_selection_to_clipboard(
        token=token
    ).result(timeout=5)
    assert outcome.status is CaptureStatus.CANCELLED
    assert spawner.calls == []


def test_future_cannot_be_cancelled_by_consumer(clipboard, main_context, make_spawner):
    spawner = make_spawner(hold=True)
    future = make_invoker(clipboard, main_context, spawner).capture_selection_to_clipboard()
    assert future.cancel() is False
    spawner.processes[0].finish(0)
    assert future.result(timeout=5).status is CaptureStatus.EMPTY


def test_capture_after_main_context_closed_resolves_failed(clipboard, main_context, make_spawner):
    spawner = make_spawner()
    main_context.close()
    outcome = make_invoker(clipboard, main_context, spawner).capture_selection_to_clipboard().result(timeout=5)
    assert outcome.status is CaptureStatus.FAILED
    assert spawner.calls == []


def test_utility_exiting_after_main_context_closed_resolves_failed(clipboard, main_context, make_spawner):
    spawner = make_spawner(hold=True)
    received = []
    future = make_invoker(clipboard, main_context, spawner).capture_selection_to_clipboard(received.append)

    main_context.close()
    spawner.processes[0].finish(0)

    assert future.result(timeout=5).status is CaptureStatus.FAILED
    assert received == [None]

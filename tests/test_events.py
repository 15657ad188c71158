from iconlink.core.events import CompositeDisposable, Disposable, Emitter


def test_emit_reaches_channel_subscribers_only():
    emitter = Emitter()
    got, other = [], []
    emitter.on("did-change-icon", got.append)
    emitter.on("did-destroy", other.append)

    emitter.emit("did-change-icon", "payload")

    assert got == ["payload"]
    assert other == []


def test_dispose_subscription_stops_delivery():
    emitter = Emitter()
    got = []
    sub = emitter.on("did-change-icon", got.append)
    sub.dispose()
    sub.dispose()
    emitter.emit("did-change-icon", 1)
    assert got == []
    assert emitter.handler_count() == 0


def test_handler_may_unsubscribe_during_emit():
    emitter = Emitter()
    got = []
    subs = {}

    def once(payload):
        got.append(payload)
        subs["once"].dispose()

    subs["once"] = emitter.on("did-change-master", once)
    emitter.on("did-change-master", got.append)

    emitter.emit("did-change-master", "a")
    emitter.emit("did-change-master", "b")
    assert got == ["a", "a", "b"]


def test_disposed_emitter_is_inert():
    emitter = Emitter()
    got = []
    emitter.on("did-destroy", got.append)
    emitter.dispose()
    emitter.emit("did-destroy", 1)
    emitter.on("did-destroy", got.append).dispose()
    assert got == []
    assert emitter.handler_count("did-destroy") == 0


def test_composite_disposes_children_once():
    calls = []
    a = Disposable(lambda: calls.append("a"))
    b = Disposable(lambda: calls.append("b"))
    group = CompositeDisposable(a)
    group.add(b)
    assert len(group) == 2

    group.dispose()
    group.dispose()
    assert calls == ["a", "b"]

    late = Disposable(lambda: calls.append("late"))
    group.add(late)
    assert late.disposed
    assert calls == ["a", "b", "late"]

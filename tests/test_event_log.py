from ledger.event_log import EVT_TRANSFER, EventLog, TokenEvent


def test_emit_assigns_sequence_numbers():
    log = EventLog()
    first = log.emit(EVT_TRANSFER, amount=1)
    second = log.emit("Approval", amount=2)
    assert (first.seq, second.seq) == (0, 1)
    assert len(log) == 2
    assert [ev.name for ev in log.by_name(EVT_TRANSFER)] == [EVT_TRANSFER]


def test_truncate_discards_newer_events():
    log = EventLog()
    for i in range(5):
        log.emit(EVT_TRANSFER, amount=i)
    log.truncate(2)
    assert [ev.args["amount"] for ev in log.all_events()] == [0, 1]


def test_tail():
    log = EventLog()
    for i in range(5):
        log.emit(EVT_TRANSFER, amount=i)
    assert [ev.seq for ev in log.tail(2)] == [3, 4]
    assert log.tail(0) == []


def test_event_dict_round_trip():
    ev = TokenEvent(seq=3, ts=12.5, name=EVT_TRANSFER, args={"amount": 9})
    assert TokenEvent.from_dict(ev.to_dict()) == ev

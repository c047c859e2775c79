"""Contract every EventStore implementation has to meet."""

from datetime import timedelta

import pytest

from shortener.interfaces.eventstore import (
    DuplicateEventIdError,
    InvalidEnvelopeError,
    VersionConflictError,
)


def append_all(store, make_envelope, *streams):
    """Append one single-event batch per slug in *streams*, numbering versions."""
    versions: dict[str, int] = {}
    stored = []
    for slug in streams:
        versions[slug] = versions.get(slug, 0) + 1
        stored.extend(store.append([make_envelope(stream_id=slug, version=versions[slug])]))
    return stored


def is_utc(moment) -> bool:
    return moment is not None and moment.utcoffset() == timedelta(0)


# --- appending ---------------------------------------------------------------


def test_store_fills_in_sequence_and_time(eventstore, make_envelope):
    """A stored envelope gets a positive global_seq and a UTC timestamp."""
    (stored,) = eventstore.append([make_envelope()])
    assert stored.global_seq >= 1
    assert is_utc(stored.recorded_at)


def test_batch_comes_back_in_input_order(eventstore, make_envelope):
    """Envelopes are returned in the order given, with rising global_seq."""
    batch = [make_envelope(version=1), make_envelope(version=2)]
    stored = eventstore.append(batch)
    assert [e.event_id for e in stored] == [e.event_id for e in batch]
    assert stored[0].global_seq < stored[1].global_seq


def test_global_seq_rises_across_slugs(eventstore, make_envelope):
    """Sequence numbers are shared by all slugs."""
    first, second = append_all(eventstore, make_envelope, "a", "b")
    assert first.global_seq < second.global_seq


def test_history_is_never_rewritten(eventstore, make_envelope):
    """Appending more events leaves the earlier ones exactly as they were."""
    (first,) = append_all(eventstore, make_envelope, "a")
    append_all(eventstore, make_envelope, "b", "c")
    assert list(eventstore.read_since(limit=1)) == [first]


def test_store_overrides_caller_timestamp(eventstore, make_envelope, utc_now):
    """The store stamps the time of the append, not the one supplied."""
    yesterday = utc_now - timedelta(days=1)
    (stored,) = eventstore.append([make_envelope(recorded_at=yesterday)])
    assert stored.recorded_at >= utc_now
    assert is_utc(stored.recorded_at)


# --- refused appends -----------------------------------------------------------


def test_event_ids_are_unique_across_slugs(eventstore, make_envelope):
    """An event id already stored under one slug cannot be reused elsewhere."""
    eventstore.append([make_envelope(event_id="7" * 26)])
    with pytest.raises(DuplicateEventIdError, match="duplicate event_id"):
        eventstore.append([make_envelope(stream_id="other", event_id="7" * 26)])


def test_stale_version_refuses_whole_batch(eventstore, make_envelope):
    """A batch starting at an existing version is refused and nothing is kept."""
    eventstore.append([make_envelope(stream_id="s", version=1)])
    stale = [make_envelope(stream_id="s", version=1), make_envelope(stream_id="s", version=2)]

    with pytest.raises(VersionConflictError, match="expected first version 2, got 1"):
        eventstore.append(stale)
    assert [e.version for e in eventstore.read_stream("s")] == [1]


def test_new_slug_must_start_at_version_one(eventstore, make_envelope):
    """Skipping version 1 on an empty stream is a conflict."""
    with pytest.raises(VersionConflictError, match="expected first version 1, got 2"):
        eventstore.append([make_envelope(stream_id="s", version=2)])
    assert not list(eventstore.read_stream("s"))


@pytest.mark.parametrize(
    "batch_spec",
    [
        [("a", 1), ("b", 1)],
        [("a", 1), ("a", 3)],
        [],
    ],
    ids=["two slugs", "version gap", "empty"],
)
def test_malformed_batches_are_refused(eventstore, make_envelope, batch_spec):
    """Batches that break the single-stream rules never reach the log."""
    batch = [make_envelope(stream_id=slug, version=v) for slug, v in batch_spec]
    with pytest.raises(InvalidEnvelopeError):
        eventstore.append(batch)
    assert not list(eventstore.read_since())


def test_empty_batch_message(eventstore):
    """The empty batch error says what is wrong."""
    with pytest.raises(InvalidEnvelopeError, match="Empty batch"):
        eventstore.append([])


# --- reading -----------------------------------------------------------------


def test_read_stream_bounds_are_inclusive(eventstore, make_envelope):
    """Both ends of a version range are part of the result."""
    append_all(eventstore, make_envelope, *["s"] * 4)

    def versions(low, high):
        return [e.version for e in eventstore.read_stream("s", low, high)]

    assert versions(2, 3) == [2, 3]
    assert versions(2, 2) == [2]
    assert versions(3, None) == [3, 4]


def test_read_stream_skips_other_slugs(eventstore, make_envelope):
    """Only the requested slug's events are returned."""
    append_all(eventstore, make_envelope, "a", "b", "a")
    assert [(e.stream_id, e.version) for e in eventstore.read_stream("a")] == [
        ("a", 1),
        ("a", 2),
    ]


def test_unknown_slug_reads_nothing(eventstore):
    """A slug without events gives an empty result."""
    assert not list(eventstore.read_stream("nope"))


def test_read_since_starts_after_cursor(eventstore, make_envelope):
    """Events come back after the cursor, in order, up to the limit."""
    first, second, third = append_all(eventstore, make_envelope, "a", "a", "b")
    assert list(eventstore.read_since(first.global_seq, limit=2)) == [second, third]
    assert list(eventstore.read_since(first.global_seq, limit=1)) == [second]


def test_read_since_defaults_to_everything(eventstore, make_envelope):
    """Without arguments the whole log is replayed."""
    stored = append_all(eventstore, make_envelope, "a", "a", "b")
    assert list(eventstore.read_since()) == stored


def test_read_since_past_the_end(eventstore, make_envelope):
    """A cursor beyond the last event reads nothing."""
    append_all(eventstore, make_envelope, "a")
    assert not list(eventstore.read_since(10_000_000))


@pytest.mark.parametrize(
    ("low", "high", "message"),
    [
        (0, None, r"^from_version must be >= 1$"),
        (3, 2, r"^to_version must be >= from_version$"),
    ],
)
def test_read_stream_rejects_bad_ranges(eventstore, low, high, message):
    """Impossible version ranges are errors rather than empty reads."""
    with pytest.raises(ValueError, match=message):
        list(eventstore.read_stream("s", low, high))


@pytest.mark.parametrize(
    ("cursor", "limit", "message"),
    [
        (-1, None, r"^global_seq must be >= 0$"),
        (0, 0, r"^limit cannot be <= 0$"),
    ],
)
def test_read_since_rejects_bad_arguments(eventstore, cursor, limit, message):
    """A negative cursor or a non-positive limit is an error."""
    with pytest.raises(ValueError, match=message):
        list(eventstore.read_since(cursor, limit))

from taxonomy_admin.schemas.outcome import CommandAction, Outcome, OutcomeStatus
from taxonomy_admin.services.outcomes import OutcomeChannel


def _outcome(status: OutcomeStatus = OutcomeStatus.SUCCESS) -> Outcome:
    return Outcome(status=status, action=CommandAction.CREATE_CATEGORY, message="done")


def test_drain_returns_pending_once() -> None:
    channel = OutcomeChannel()
    first = channel.publish(_outcome())
    second = channel.publish(_outcome(OutcomeStatus.STORE_FAILURE))

    assert channel.drain() == [first, second]
    assert channel.drain() == []
    assert not second.ok


def test_broken_subscriber_does_not_block_others() -> None:
    channel = OutcomeChannel()
    seen: list[Outcome] = []

    def broken(outcome: Outcome) -> None:
        raise RuntimeError("render failed")

    channel.subscribe(broken)
    channel.subscribe(seen.append)
    outcome = channel.publish(_outcome())

    assert seen == [outcome]
    assert channel.pending == [outcome]


def test_pending_buffer_keeps_only_the_newest_outcomes() -> None:
    channel = OutcomeChannel(max_pending=2)
    channel.publish(_outcome())
    second = channel.publish(_outcome(OutcomeStatus.STORE_FAILURE))
    third = channel.publish(_outcome(OutcomeStatus.VALIDATION_ERROR))

    assert channel.drain() == [second, third]

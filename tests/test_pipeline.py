import pytest

from conftest import FakeCollaborator
from zsh_installer.errors import ConfigError
from zsh_installer.pipeline import run_pipeline
from zsh_installer.state_store import ensure_defaults, mark_step_completed, record_warning


class _Recorder:
    def __init__(self, step_id: str, log: list, *, fail: bool = False) -> None:
        self.step_id = step_id
        self.log = log
        self.fail = fail

    def run(self, ctx, state):
        self.log.append(self.step_id)
        if self.fail:
            raise RuntimeError(f"{self.step_id} broke")
        return state


def _steps(log, fail_at=None):
    return [_Recorder(s, log, fail=(s == fail_at)) for s in ("10_a", "20_b", "30_c")]


def test_runs_all_steps_in_order(make_ctx) -> None:
    log: list = []
    result = run_pipeline(ctx=make_ctx(FakeCollaborator()), state=ensure_defaults({}), steps=_steps(log))

    assert log == ["10_a", "20_b", "30_c"]
    assert result.ran_steps == log
    assert result.skipped_steps == []
    assert result.state["execution"]["completed_steps"] == log
    assert result.state["execution"]["current_step"] is None


def test_start_at_and_stop_after(make_ctx) -> None:
    log: list = []
    run_pipeline(
        ctx=make_ctx(FakeCollaborator()),
        state=ensure_defaults({}),
        steps=_steps(log),
        start_at="20_b",
        stop_after="20_b",
    )
    assert log == ["20_b"]


def test_unknown_step_id_rejected(make_ctx) -> None:
    with pytest.raises(ConfigError):
        run_pipeline(
            ctx=make_ctx(FakeCollaborator()),
            state=ensure_defaults({}),
            steps=_steps([]),
            start_at="99_nope",
        )


def test_completed_steps_rerun_without_resume(make_ctx) -> None:
    log: list = []
    state = ensure_defaults({})
    mark_step_completed(state, "10_a")

    result = run_pipeline(ctx=make_ctx(FakeCollaborator()), state=state, steps=_steps(log))

    assert log == ["10_a", "20_b", "30_c"]
    assert result.state["execution"]["completed_steps"] == ["10_a", "20_b", "30_c"]


def test_resume_skips_completed_steps(make_ctx) -> None:
    log: list = []
    state = ensure_defaults({})
    mark_step_completed(state, "10_a")

    result = run_pipeline(ctx=make_ctx(FakeCollaborator()), state=state, steps=_steps(log), resume=True)

    assert log == ["20_b", "30_c"]
    assert result.skipped_steps == ["10_a"]


def test_first_failure_stops_the_run(make_ctx) -> None:
    log: list = []
    state = ensure_defaults({})

    with pytest.raises(RuntimeError, match="20_b broke"):
        run_pipeline(ctx=make_ctx(FakeCollaborator()), state=state, steps=_steps(log, fail_at="20_b"))

    assert log == ["10_a", "20_b"]
    assert state["execution"]["current_step"] == "20_b"
    assert state["execution"]["completed_steps"] == ["10_a"]


class _Warner:
    step_id = "20_b"

    def __init__(self, log: list) -> None:
        self.log = log

    def run(self, ctx, state):
        self.log.append(self.step_id)
        record_warning(state, self.step_id, "soft failure")
        return state


def test_step_with_warning_is_retried_on_resume(make_ctx) -> None:
    log: list = []
    steps = [_Recorder("10_a", log), _Warner(log), _Recorder("30_c", log)]
    state = ensure_defaults({})

    run_pipeline(ctx=make_ctx(FakeCollaborator()), state=state, steps=steps)
    assert state["execution"]["completed_steps"] == ["10_a", "30_c"]

    log.clear()
    result = run_pipeline(ctx=make_ctx(FakeCollaborator()), state=state, steps=steps, resume=True)

    assert log == ["20_b"]
    assert result.skipped_steps == ["10_a", "30_c"]


def test_warning_drops_previous_completion(make_ctx) -> None:
    state = ensure_defaults({})
    mark_step_completed(state, "20_b")

    run_pipeline(ctx=make_ctx(FakeCollaborator()), state=state, steps=[_Warner([])])

    assert state["execution"]["completed_steps"] == []

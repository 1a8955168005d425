"""Unit tests for the bounded tool-calling loop and run control."""

import json

import pytest

from orchestrator.exceptions import RunAborted
from orchestrator.loop import RunControl, generate
from tests.stubs import JOB_ARGS, RESUME_ARGS, ScriptedModel, answer, tool_turn


def _run(model, registry, **kwargs):
    return generate(model, "system", "prompt", registry, **kwargs)


@pytest.mark.unit
def test_finishing_answer_stops_loop(registry):
    model = ScriptedModel([tool_turn(("analyze_job", JOB_ARGS)), answer("all done")])
    gen = _run(model, registry)

    assert gen.final_text == "all done"
    assert gen.finish_reason == "stop"
    assert [s.tool_names for s in gen.steps] == [["analyze_job"]]
    assert len(model.calls) == 2


@pytest.mark.unit
def test_budget_exhaustion_is_not_an_error(registry):
    model = ScriptedModel([tool_turn(("analyze_job", JOB_ARGS), text="still working")])
    gen = _run(model, registry, step_budget=10)

    assert len(model.calls) == 10
    assert len(gen.steps) == 10
    assert [s.step_index for s in gen.steps] == list(range(1, 11))
    assert gen.finish_reason == "step_budget"
    assert gen.final_text == "still working"


@pytest.mark.unit
def test_tool_results_are_fed_back_in_order(registry):
    model = ScriptedModel([
        tool_turn(("analyze_job", JOB_ARGS), ("extract_resume_data", RESUME_ARGS)),
        answer("ok"),
    ])
    _run(model, registry)

    second_turn = model.calls[1]["messages"]
    assistant, first, second = second_turn[2], second_turn[3], second_turn[4]
    assert assistant["role"] == "assistant"
    assert [tc["function"]["name"] for tc in assistant["tool_calls"]] == ["analyze_job", "extract_resume_data"]
    assert first["role"] == "tool" and first["name"] == "analyze_job"
    assert second["tool_call_id"] == assistant["tool_calls"][1]["id"]
    assert json.loads(second["content"])["success"] is True


@pytest.mark.unit
def test_failed_tool_does_not_stop_the_run(registry):
    model = ScriptedModel([tool_turn(("analyze_job", {"jobTitle": "x"})), answer("recovered")])
    gen = _run(model, registry)

    tool_msg = model.calls[1]["messages"][-1]
    assert json.loads(tool_msg["content"])["success"] is False
    assert gen.final_text == "recovered"


@pytest.mark.unit
def test_tools_offered_to_model(registry):
    model = ScriptedModel([answer("no tools needed")])
    gen = _run(model, registry)

    assert gen.steps == []
    assert len(model.calls[0]["tools"]) == 3


@pytest.mark.unit
def test_step_callback_sees_each_record(registry):
    seen = []
    model = ScriptedModel([tool_turn(("analyze_job", JOB_ARGS), text="thinking"), answer("done")])
    _run(model, registry, on_step_finish=lambda record, text: seen.append((record.step_index, text)))

    assert seen == [(1, "thinking")]


@pytest.mark.unit
def test_model_error_propagates(registry):
    model = ScriptedModel([ConnectionError("network down")])

    with pytest.raises(ConnectionError, match="network down"):
        _run(model, registry)


@pytest.mark.unit
def test_should_stop_aborts_before_next_turn(registry):
    model = ScriptedModel([tool_turn(("analyze_job", JOB_ARGS))])
    checks = iter([None, None, "Run cancelled"])

    with pytest.raises(RunAborted) as exc:
        _run(model, registry, should_stop=lambda: next(checks))

    assert exc.value.step_index == 2
    assert len(model.calls) == 2


@pytest.mark.unit
def test_run_control_timeout_and_cancel():
    now = [100.0]
    control = RunControl(timeout_s=5, clock=lambda: now[0])

    assert control.check() is None
    control.start()
    now[0] = 104.9
    assert control.check() is None
    now[0] = 105.0
    assert control.check() == "Run timed out after 5s"

    control = RunControl(timeout_s=None)
    control.start()
    control.cancel()
    assert control.cancelled
    assert control.check() == "Run cancelled"

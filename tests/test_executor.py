"""Tests for the depth-first workflow executor."""
import time

import pytest

from hookflow.errors import ExternalServiceError, InvalidWorkflowError, StartNodeNotFound
from hookflow.nodes import NodeDispatcher
from hookflow.services import ChatCompletion
from hookflow.workflow import RunState, TriggerInput, WorkflowExecutor, parse_workflow

from conftest import chain, http_response, make_node, make_workflow

WEBHOOK = "n8n-nodes-base.webhook"
HTTP = "n8n-nodes-base.httpRequest"
CODE = "n8n-nodes-base.code"
WAIT = "n8n-nodes-base.wait"
AGENT = "@n8n/n8n-nodes-langchain.agent"
RESPOND = "n8n-nodes-base.respondToWebhook"


class RecordingDispatcher(NodeDispatcher):
    """Dispatcher that records node names and the input each one received."""

    def __init__(self, services):
        super().__init__(services)
        self.calls = []

    def dispatch(self, node, input_data, workflow_id=None, execution_id=None):
        self.calls.append((node.name, input_data))
        return super().dispatch(node, input_data, workflow_id, execution_id)

    @property
    def order(self):
        return [name for name, _ in self.calls]


@pytest.fixture
def dispatcher(services):
    return RecordingDispatcher(services)


@pytest.fixture
def executor(services, dispatcher):
    return WorkflowExecutor(services, dispatcher=dispatcher)


def connect(*targets_per_slot):
    """Connection entry with one slot per argument."""
    return {"main": [[{"node": name, "type": "main", "index": 0} for name in slot] for slot in targets_per_slot]}


class TestStartNodeSeeding:

    def test_start_output_is_trigger_payload(self, executor, dispatcher):
        workflow = make_workflow(
            [make_node("Hook", WEBHOOK), make_node("Code", CODE)],
            chain("Hook", "Code"),
        )

        result = executor.execute(workflow, {"body": {"q": "hi"}, "headers": {"x-id": "1"}})

        results = result.context.results
        assert list(results)[0] == "Hook"
        assert results["Hook"] == [{"json": {"q": "hi"}, "headers": {"x-id": "1"}}]
        assert dispatcher.order[0] == "Hook"
        assert dispatcher.calls[0][1] == results["Hook"]

    def test_seed_kept_when_start_node_outputs_something_else(self, executor, services):
        services.chat.complete.return_value = ChatCompletion(text="ignored")
        workflow = make_workflow([make_node("input", AGENT)])

        result = executor.execute(workflow, TriggerInput(body={"q": "hi"}))

        assert result.context.results["input"] == [{"json": {"q": "hi"}, "headers": {}}]
        services.chat.complete.assert_called_once()

    def test_missing_body_seeds_empty_dict(self, executor):
        result = executor.execute(make_workflow([make_node("Hook", WEBHOOK)]))
        assert result.context.results["Hook"][0]["json"] == {}

    def test_no_start_node_aborts_before_dispatch(self, executor, dispatcher):
        workflow = make_workflow([make_node("Code", CODE)])

        with pytest.raises(StartNodeNotFound):
            executor.execute(workflow, {"body": {}})
        assert dispatcher.calls == []

    def test_invalid_definition(self, executor):
        workflow = make_workflow([make_node("A", WEBHOOK), make_node("A", CODE)])

        with pytest.raises(InvalidWorkflowError):
            executor.execute(workflow)


class TestTraversal:

    def test_cycle_dispatches_each_node_once(self, executor, dispatcher, services):
        workflow = make_workflow(
            [
                make_node("A", WEBHOOK),
                make_node("B", HTTP, url="https://b.example.com"),
                make_node("C", HTTP, url="https://c.example.com"),
            ],
            {"A": connect(["B"]), "B": connect(["C"]), "C": connect(["B", "A"])},
        )

        executor.execute(workflow, {"body": {}})

        assert dispatcher.order == ["A", "B", "C"]
        assert services.http.request.call_count == 2

    def test_self_loop(self, executor, dispatcher):
        workflow = make_workflow([make_node("A", WEBHOOK)], {"A": connect(["A"])})

        executor.execute(workflow)

        assert dispatcher.order == ["A"]

    def test_diamond_converges_once_with_first_branch(self, executor, dispatcher, services):
        services.http.request.side_effect = lambda method, url, **kwargs: http_response(
            {"branch": url.rsplit("/", 1)[-1]}
        )
        workflow = make_workflow(
            [
                make_node("A", WEBHOOK),
                make_node("B", HTTP, url="https://api.example.com/B"),
                make_node("C", HTTP, url="https://api.example.com/C"),
                make_node("D", AGENT, text="from {{ $json.branch }}"),
            ],
            {"A": connect(["B", "C"]), "B": connect(["D"]), "C": connect(["D"])},
        )

        result = executor.execute(workflow, {"body": {}})

        assert dispatcher.order == ["A", "B", "D", "C"]
        services.chat.complete.assert_called_once_with("from B")
        assert result.context.results["D"] == [{"json": {"output": "hello"}}]

    def test_slots_explored_left_to_right_depth_first(self, executor, dispatcher):
        workflow = make_workflow(
            [make_node(name, CODE if name != "A" else WEBHOOK) for name in "ABCDE"],
            {"A": connect(["B", "C"], ["D"]), "B": connect(["E"])},
        )

        executor.execute(workflow)

        assert dispatcher.order == ["A", "B", "E", "C", "D"]

    def test_terminal_node_ends_branch(self, executor, dispatcher):
        workflow = make_workflow(
            [make_node("A", WEBHOOK), make_node("B", CODE), make_node("Orphan", CODE)],
            chain("A", "B"),
        )

        result = executor.execute(workflow)

        assert dispatcher.order == ["A", "B"]
        assert "Orphan" not in result.context.results

    def test_unknown_target_skipped(self, executor, dispatcher, caplog):
        workflow = make_workflow(
            [make_node("A", WEBHOOK), make_node("B", CODE)],
            {"A": connect(["Ghost", "B"])},
        )

        with caplog.at_level("WARNING"):
            executor.execute(workflow)

        assert dispatcher.order == ["A", "B"]
        assert "Ghost" in caplog.text

    def test_downstream_input_is_predecessor_output(self, executor, dispatcher, services):
        services.http.request.return_value = http_response({"user": "ada"})
        workflow = make_workflow(
            [make_node("A", WEBHOOK), make_node("B", HTTP, url="https://x"), make_node("C", CODE)],
            chain("A", "B", "C"),
        )

        executor.execute(workflow, {"body": {"q": 1}})

        assert dispatcher.calls[2] == ("C", [{"json": {"user": "ada"}}])

    def test_dispatch_error_aborts_run(self, executor, dispatcher, services):
        response = http_response(None)
        response.raise_for_status.side_effect = ExternalServiceError("http", "HTTP 503", status_code=503)
        services.http.request.return_value = response
        workflow = make_workflow(
            [make_node("A", WEBHOOK), make_node("B", HTTP, url="https://x"), make_node("C", CODE)],
            chain("A", "B", "C"),
        )

        with pytest.raises(ExternalServiceError):
            executor.execute(workflow)
        assert dispatcher.order == ["A", "B"]

    def test_runs_do_not_share_state(self, executor):
        workflow = parse_workflow(make_workflow([make_node("Hook", WEBHOOK)]))

        first = executor.execute(workflow, {"body": {"n": 1}})
        second = executor.execute(workflow, {"body": {"n": 2}})

        assert first.context is not second.context
        assert first.execution_id != second.execution_id
        assert first.context.results["Hook"][0]["json"] == {"n": 1}
        assert first.context.state is RunState.DONE
        assert first.context.current_node is None

    def test_state_names_the_node_being_visited(self, services, dispatcher):
        seen = []

        class WatchingExecutor(WorkflowExecutor):
            def _input_for(self, name, source, context):
                seen.append((context.state, context.current_node))
                return super()._input_for(name, source, context)

        workflow = make_workflow(
            [make_node("Hook", WEBHOOK), make_node("Code", CODE)],
            chain("Hook", "Code"),
        )

        WatchingExecutor(services, dispatcher=dispatcher).execute(workflow)

        assert seen == [(RunState.VISITING, "Hook"), (RunState.VISITING, "Code")]


class TestResponse:

    def test_end_to_end_agent_reply(self, executor, services):
        workflow = make_workflow(
            [
                make_node("input", WEBHOOK),
                make_node("AI", AGENT, text="={{ $json.question }}"),
                make_node("Respond", RESPOND, responseBody="={{ $json.output }}"),
            ],
            chain("input", "AI", "Respond"),
        )

        result = executor.execute(workflow, {"body": {"question": "hi"}})

        services.chat.complete.assert_called_once_with("hi")
        assert result.response_found
        assert result.final_payload == "hello"

    def test_whole_expression_number_reaches_caller(self, executor):
        workflow = make_workflow(
            [make_node("Hook", WEBHOOK), make_node("Respond", RESPOND, responseBody="={{ $json.a.b }}")],
            chain("Hook", "Respond"),
        )

        result = executor.execute(workflow, {"body": {"a": {"b": 5}}})

        assert result.final_payload == 5

    def test_without_responder_returns_context(self, executor):
        workflow = make_workflow([make_node("Hook", WEBHOOK)])

        result = executor.execute(workflow, {"body": {"q": 1}})

        assert not result.response_found
        assert result.final_payload == result.context.to_dict()
        assert result.final_payload["results"]["Hook"][0]["json"] == {"q": 1}


class TestWait:

    def test_wait_delays_next_node(self, services):
        calls = []
        services.sleep = time.sleep
        services.chat.complete.side_effect = lambda prompt: calls.append(time.perf_counter()) or ChatCompletion("ok")
        workflow = make_workflow(
            [make_node("Hook", WEBHOOK), make_node("Wait", WAIT, amount=1), make_node("AI", AGENT)],
            chain("Hook", "Wait", "AI"),
        )

        started = time.perf_counter()
        WorkflowExecutor(services).execute(workflow)

        assert len(calls) == 1
        assert calls[0] - started >= 1.0

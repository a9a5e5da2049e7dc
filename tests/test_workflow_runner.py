"""Tests for the execution engine state machine."""

from __future__ import annotations

import re

import pytest

from edgeflow.core.exceptions import CyclicWorkflowError, InvalidWorkflowError
from edgeflow.engine.types import (
    Connection,
    LogStatus,
    RunState,
    Workflow,
)
from edgeflow.engine.workflow_runner import WorkflowRunner

from helpers import make_chain, make_node


def _logged_node_ids(record) -> list[str]:
    seen: list[str] = []
    for entry in record.logs:
        if entry.node_id not in seen:
            seen.append(entry.node_id)
    return seen


class TestSuccessfulRuns:
    async def test_transform_adds_output_key(self, run_workflow):
        workflow = make_chain(make_node("a", "TRANSFORM", expression="data.x + 1", outputKey="y"))

        record = await run_workflow(workflow, {"x": 1})

        assert record.success is True
        assert record.status is RunState.COMPLETED
        assert record.final_data["y"] == 2
        assert record.final_data["x"] == 1
        assert record.results == {"a": {"y": 2}}
        assert [e.status for e in record.logs] == [LogStatus.STARTED, LogStatus.COMPLETED]
        assert record.logs[1].result == {"y": 2}

    async def test_later_results_win_on_key_collision(self, run_workflow):
        workflow = make_chain(
            make_node("a", "TRANSFORM", expression="1", outputKey="v"),
            make_node("b", "TRANSFORM", expression="v + 10", outputKey="v"),
        )

        record = await run_workflow(workflow, {"v": 0})

        assert record.final_data["v"] == 11
        assert record.results["a"] == {"v": 1}

    async def test_nodes_run_in_topological_order(self, run_workflow):
        workflow = Workflow(
            name="reversed",
            nodes=[
                make_node("last", "TRANSFORM", expression="step + 1", outputKey="step"),
                make_node("first", "TRANSFORM", expression="0", outputKey="step"),
            ],
            connections=[Connection("first", "last")],
        )

        record = await run_workflow(workflow)

        assert _logged_node_ids(record) == ["first", "last"]
        assert record.final_data["step"] == 1

    async def test_merge_sees_all_prior_results(self, run_workflow):
        workflow = make_chain(
            make_node("a", "TRANSFORM", expression="1", outputKey="a"),
            make_node("b", "TRANSFORM", expression="2", outputKey="b"),
            make_node("m", "MERGE", strategy="merge"),
        )

        record = await run_workflow(workflow)

        assert record.results["m"] == {"merged": {"a": 1, "b": 2}}

    async def test_edges_to_unknown_nodes_are_ignored(self, run_workflow):
        workflow = Workflow(
            name="dangling",
            nodes=[make_node("a", "TRANSFORM", expression="1", outputKey="one")],
            connections=[Connection("a", "ghost")],
        )

        record = await run_workflow(workflow)

        assert record.success is True
        assert _logged_node_ids(record) == ["a"]

    async def test_edge_from_unknown_node_does_not_block_target(self, run_workflow):
        workflow = Workflow(
            name="dangling-source",
            nodes=[
                make_node("a", "TRANSFORM", expression="1", outputKey="one"),
                make_node("b", "TRANSFORM", expression="one + 1", outputKey="two"),
            ],
            connections=[Connection("ghost", "b"), Connection("a", "b")],
        )

        record = await run_workflow(workflow)

        assert record.success is True
        assert _logged_node_ids(record) == ["a", "b"]
        assert record.final_data["two"] == 2

    async def test_execution_id_and_duration(self, run_workflow):
        record = await run_workflow(make_chain(make_node("a", "TRANSFORM")))

        assert re.fullmatch(r"exec-\d+-[0-9a-f]{7}", record.execution_id)
        assert record.duration >= 0
        assert record.workflow_id == "wf-test"

    async def test_trigger_data_is_not_mutated(self, run_workflow):
        trigger = {"x": 1}
        await run_workflow(make_chain(make_node("a", "TRANSFORM", outputKey="x")), trigger)
        assert trigger == {"x": 1}


class TestEarlyTermination:
    async def test_false_filter_stops_run_without_failing(self, run_workflow):
        nodes = [
            make_node("t1", "TRANSFORM", expression="1", outputKey="one"),
            make_node("f", "FILTER", condition="false"),
            make_node("t3", "TRANSFORM", expression="3", outputKey="three"),
        ]

        record = await run_workflow(make_chain(*nodes))

        assert record.success is True
        assert record.status is RunState.COMPLETED
        assert len(_logged_node_ids(record)) == 1 + 1
        assert "t3" not in record.results
        assert record.results["f"] == {"passed": False}
        assert record.terminated_by == "f"
        assert record.filtered_out is True
        assert record.to_dict()["terminatedBy"] == "f"

    async def test_true_filter_lets_run_continue(self, run_workflow):
        nodes = [
            make_node("f", "FILTER", condition="score >= 5"),
            make_node("t", "TRANSFORM", expression="score * 2", outputKey="double"),
        ]

        record = await run_workflow(make_chain(*nodes), {"score": 7})

        assert record.final_data["double"] == 14
        assert record.terminated_by is None
        assert record.filtered_out is False
        assert "terminatedBy" not in record.to_dict()


class TestFailedRuns:
    async def test_unknown_node_type_fails_run(self, run_workflow):
        nodes = [
            make_node("a", "TRANSFORM", expression="1", outputKey="one"),
            make_node("b", "TELEPORT"),
            make_node("c", "TRANSFORM", expression="2", outputKey="two"),
        ]

        record = await run_workflow(make_chain(*nodes))

        assert record.success is False
        assert record.status is RunState.FAILED
        assert record.error_type == "UnknownNodeTypeError"
        assert "TELEPORT" in record.error
        assert record.logs[-1].node_id == "b"
        assert record.logs[-1].status is LogStatus.FAILED
        assert record.logs[-1].error == record.error
        assert "c" not in _logged_node_ids(record)

    async def test_expression_failure_keeps_log_so_far(self, run_workflow):
        nodes = [
            make_node("a", "TRANSFORM", expression="1", outputKey="one"),
            make_node("b", "TRANSFORM", expression="missing_name + 1"),
        ]

        record = await run_workflow(make_chain(*nodes))

        assert record.success is False
        assert record.error_type == "ExpressionError"
        assert record.error.startswith("Transform failed")
        assert [(e.node_id, e.status) for e in record.logs] == [
            ("a", LogStatus.STARTED),
            ("a", LogStatus.COMPLETED),
            ("b", LogStatus.STARTED),
            ("b", LogStatus.FAILED),
        ]
        assert record.results == {"a": {"one": 1}}

    async def test_failed_record_wire_shape(self, run_workflow):
        record = await run_workflow(make_chain(make_node("x", "TELEPORT")))

        wire = record.to_dict()

        assert set(wire) == {"success", "executionId", "error", "errorType", "duration", "logs"}
        assert wire["success"] is False
        assert wire["logs"][-1]["status"] == "failed"
        assert wire["logs"][-1]["nodeId"] == "x"

    async def test_success_record_wire_shape(self, run_workflow):
        record = await run_workflow(make_chain(make_node("a", "TRANSFORM", expression="2", outputKey="y")))

        wire = record.to_dict()

        assert set(wire) == {"success", "executionId", "duration", "results", "logs", "finalData"}
        assert wire["finalData"] == {"y": 2}
        assert wire["logs"][0]["nodeName"] == "a"
        assert "timestamp" in wire["logs"][0]


class TestValidation:
    async def test_empty_workflow_is_rejected(self, run_workflow):
        with pytest.raises(InvalidWorkflowError):
            await run_workflow(Workflow(name="empty", nodes=[]))

    async def test_cycle_is_rejected_before_any_node_runs(self, registry, services):
        entries = []
        workflow = Workflow(
            name="cyclic",
            nodes=[
                make_node("a", "TRANSFORM"),
                make_node("b", "TRANSFORM"),
                make_node("c", "TRANSFORM"),
            ],
            connections=[Connection("a", "b"), Connection("b", "a")],
        )
        runner = WorkflowRunner(registry=registry, services=services, on_log=entries.append)

        with pytest.raises(CyclicWorkflowError) as exc_info:
            await runner.run(workflow)

        assert exc_info.value.node_ids == ["a", "b"]
        assert entries == []
        assert isinstance(exc_info.value, InvalidWorkflowError)

    async def test_lenient_cycle_policy_skips_cycle_members(self, run_workflow):
        workflow = Workflow(
            name="cyclic",
            nodes=[
                make_node("a", "TRANSFORM"),
                make_node("b", "TRANSFORM"),
                make_node("c", "TRANSFORM", expression="1", outputKey="ran"),
            ],
            connections=[Connection("a", "b"), Connection("b", "a")],
        )

        record = await run_workflow(workflow, reject_cycles=False)

        assert record.success is True
        assert _logged_node_ids(record) == ["c"]


class TestRunnerLifecycle:
    async def test_runner_runs_once(self, registry, services):
        runner = WorkflowRunner(registry=registry, services=services)
        assert runner.state is RunState.PENDING

        await runner.run(make_chain(make_node("a", "TRANSFORM")))
        assert runner.state is RunState.COMPLETED

        with pytest.raises(RuntimeError):
            await runner.run(make_chain(make_node("a", "TRANSFORM")))

    async def test_on_log_receives_every_entry(self, registry, services):
        entries = []
        runner = WorkflowRunner(registry=registry, services=services, on_log=entries.append)

        record = await runner.run(make_chain(make_node("a", "TRANSFORM"), make_node("b", "TRANSFORM")))

        assert entries == list(record.logs)

    async def test_on_log_errors_do_not_break_run(self, registry, services):
        def broken(entry):
            raise ValueError("listener down")

        runner = WorkflowRunner(registry=registry, services=services, on_log=broken)

        record = await runner.run(make_chain(make_node("a", "TRANSFORM")))

        assert record.success is True


class TestCacheAcrossRuns:
    async def test_second_run_reads_what_first_run_wrote(self, run_workflow, clock):
        workflow = make_chain(
            make_node("get", "EDGE_CACHE", action="get", key="user:${user}"),
            make_node("set", "EDGE_CACHE", action="set", key="user:${user}", ttl=60),
        )
        trigger = {"user": "u1"}

        first = await run_workflow(workflow, trigger)
        second = await run_workflow(workflow, trigger)

        assert first.results["get"] == {"cached": False, "data": None}
        written = {"user": "u1", "cached": False, "data": None}
        assert second.results["get"] == {"cached": True, "data": written}

        clock.advance(61)
        third = await run_workflow(workflow, trigger)
        assert third.results["get"] == {"cached": False, "data": None}

"""
CLI tool for running webhook workflows.

Provides terminal access to:
- Running a workflow file against a payload
- Saving workflow files to the definition store
- Listing stored workflows
- Triggering a stored workflow by webhook path
"""

import sys
import json
import argparse
from pathlib import Path
from typing import Any, Dict, List, Optional

from hookflow.errors import HookflowError
from hookflow.observability import setup_logging
from hookflow.runner import RunOutcome, WorkflowService
from hookflow.services import Services
from hookflow.services.store import RedisDefinitionStore
from hookflow.workflow import TriggerInput, WorkflowExecutor


def parse_headers(pairs: Optional[List[str]]) -> Dict[str, str]:
    """Turn ['k=v', ...] into a dict."""
    headers = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"Header must be key=value: {pair}")
        headers[key.strip()] = value.strip()
    return headers


def parse_body(raw: Optional[str]) -> Any:
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def load_json_file(path: str) -> Dict[str, Any]:
    return json.loads(Path(path).read_text(encoding="utf-8"))


def print_outcome(outcome: RunOutcome) -> int:
    print(json.dumps(outcome.to_dict(), indent=2, ensure_ascii=False, default=str))
    return 0 if outcome.ok else 1


def build_service() -> WorkflowService:
    return WorkflowService(RedisDefinitionStore(), WorkflowExecutor(Services.from_settings()))


def cmd_run(args: argparse.Namespace) -> int:
    """Run a workflow file without storing it."""
    workflow = load_json_file(args.file)
    trigger_input = TriggerInput(body=parse_body(args.body), headers=parse_headers(args.header))
    executor = WorkflowExecutor(Services.from_settings())

    try:
        result = executor.execute(workflow, trigger_input)
    except HookflowError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(result.final_payload, indent=2, ensure_ascii=False, default=str))
    return 0


def cmd_save(args: argparse.Namespace) -> int:
    body = load_json_file(args.file)
    if args.id:
        body = {"id": args.id, "workflow": body}
    try:
        workflow_id = build_service().save_workflow(body)
    except HookflowError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(workflow_id)
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    for workflow in build_service().list_workflows():
        print(f"{workflow.id}\t{workflow.name}\t{len(workflow.nodes)} nodes")
    return 0


def cmd_webhook(args: argparse.Namespace) -> int:
    """Trigger the stored workflow listening on a webhook path."""
    outcome = build_service().handle_webhook(
        args.hook_id,
        body=parse_body(args.body),
        headers=parse_headers(args.header),
    )
    return print_outcome(outcome)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="hookflow",
        description="Run webhook-triggered workflows",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--log-level", help="Override HOOKFLOW_LOG_LEVEL")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # run command
    run_parser = subparsers.add_parser("run", help="Run a workflow JSON file")
    run_parser.add_argument("file", help="Path to workflow JSON")
    run_parser.add_argument("--body", help="Trigger body (JSON or text)")
    run_parser.add_argument("--header", action="append", help="Trigger header key=value (repeatable)")

    # save command
    save_parser = subparsers.add_parser("save", help="Store a workflow JSON file")
    save_parser.add_argument("file", help="Path to workflow JSON")
    save_parser.add_argument("--id", help="Workflow id (generated when omitted)")

    # list command
    subparsers.add_parser("list", help="List stored workflows")

    # webhook command
    webhook_parser = subparsers.add_parser("webhook", help="Trigger a stored workflow by webhook path")
    webhook_parser.add_argument("hook_id", help="Webhook path or webhookId")
    webhook_parser.add_argument("--body", help="Trigger body (JSON or text)")
    webhook_parser.add_argument("--header", action="append", help="Trigger header key=value (repeatable)")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(level=args.log_level)

    try:
        if args.command == "run":
            return cmd_run(args)
        elif args.command == "save":
            return cmd_save(args)
        elif args.command == "list":
            return cmd_list(args)
        elif args.command == "webhook":
            return cmd_webhook(args)
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))

    print(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    sys.exit(main())

"""CLI for AgentRouter - task classification and agent delegation."""

from __future__ import annotations

import json
import logging
import os
import re
import sys
from pathlib import Path

import click

from agentrouter import __version__
from agentrouter.config import (
    ENV_CODEX_BINARY,
    ENV_GEMINI_BINARY,
    ENV_TIMEOUT,
    ENV_WORK_DIR,
    RouterConfig,
)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _configure_logging(verbose: bool) -> None:
    # stdout carries MCP protocol traffic, so logs always go to stderr
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


@click.group()
@click.version_option(version=__version__, prog_name="agentrouter")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option(
    "--work-dir", "-w",
    default=None,
    type=click.Path(exists=True, file_okay=False, dir_okay=True, resolve_path=True),
    help="Working directory for delegated agents (defaults to current directory)",
)
@click.option("--timeout", default=None, type=int, help="Agent timeout in seconds")
@click.pass_context
def main(ctx: click.Context, verbose: bool, work_dir: str | None, timeout: int | None) -> None:
    """AgentRouter - route tasks to Codex, Gemini or handle them directly.

    Classifies free-text tasks with weighted patterns and delegates them
    to the matching AI agent CLI.
    """
    _configure_logging(verbose)
    ctx.obj = RouterConfig.from_env(
        work_dir=Path(work_dir) if work_dir else None,
        timeout_seconds=timeout,
    )


@main.command()
@click.argument("message")
@click.option("--json", "as_json", is_flag=True, help="Output raw JSON")
def classify(message: str, as_json: bool) -> None:
    """Classify a task without running anything.

    \b
    Example:
        agentrouter classify "implement a login form with tests"
    """
    from agentrouter.classifier import classify as classify_message
    from agentrouter.formatting import format_decision

    decision = classify_message(message)

    if as_json:
        click.echo(json.dumps(decision.model_dump(mode="json"), indent=2, ensure_ascii=False))
        return

    click.echo(format_decision(decision))


@main.command()
@click.argument("message")
@click.option("--dry-run", is_flag=True, help="Classify only, do not run the agent")
@click.option(
    "--target", "-t",
    type=click.Choice(["internal", "codex", "gemini"]),
    default=None,
    help="Force a destination instead of classifying",
)
@click.option("--task-type", default=None, help="Sub-type override (e.g. test, compare)")
@click.option("--option", "-o", "options", multiple=True, help="Option to compare (repeatable)")
@click.option(
    "--depth",
    type=click.Choice(["quick", "detailed"]),
    default="detailed",
    help="Research depth",
)
@click.option("--json", "as_json", is_flag=True, help="Output raw JSON")
@click.pass_obj
def route(
    config: RouterConfig,
    message: str,
    dry_run: bool,
    target: str | None,
    task_type: str | None,
    options: tuple[str, ...],
    depth: str,
    as_json: bool,
) -> None:
    """Classify a task and delegate it to the chosen agent.

    \b
    Example:
        agentrouter route "refactor the payment module"
        agentrouter route "compare state libraries" -o redux -o zustand
    """
    from agentrouter.dispatch import route as route_message
    from agentrouter.executors import Executors
    from agentrouter.formatting import format_decision, format_result
    from agentrouter.prompt_engine import InvalidArgumentError
    from agentrouter.schemas import Destination, DispatchStatus, ResearchDepth

    executors = Executors.from_config(config)

    try:
        response = route_message(
            message,
            executors,
            execute=not dry_run,
            target=Destination(target) if target else None,
            task_type=task_type,
            options=list(options),
            depth=ResearchDepth(depth),
        )
    except InvalidArgumentError as e:
        raise click.BadParameter(str(e))

    if as_json:
        click.echo(json.dumps(response.model_dump(mode="json"), indent=2, ensure_ascii=False))
    else:
        click.echo(format_decision(response.decision))
        if response.result is not None:
            click.echo()
            click.echo(format_result(response.result))

    if response.result is not None and response.result.status == DispatchStatus.FAILED:
        sys.exit(1)


@main.command()
@click.pass_obj
def check(config: RouterConfig) -> None:
    """Check whether the agent CLIs are installed."""
    from agentrouter.executors import Executors
    from agentrouter.formatting import format_agent_status

    executors = Executors.from_config(config)
    statuses = [executor.status() for executor in executors.all()]
    click.echo(format_agent_status(statuses))
    click.echo(f"\nWorking directory: {config.work_dir}")


@main.command()
@click.option("--port", default=8000, help="Port to run the broker on")
@click.option("--host", default="127.0.0.1", help="Host to bind to")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
@click.pass_obj
def serve(config: RouterConfig, port: int, host: str, reload: bool) -> None:
    """Start the AgentRouter HTTP broker server."""
    import uvicorn

    # The app factory reads its config from the environment
    os.environ[ENV_WORK_DIR] = str(config.work_dir)
    os.environ[ENV_CODEX_BINARY] = config.codex_binary
    os.environ[ENV_GEMINI_BINARY] = config.gemini_binary
    os.environ[ENV_TIMEOUT] = str(config.timeout_seconds)

    click.echo(f"Starting AgentRouter broker on {host}:{port}")
    uvicorn.run(
        "agentrouter.broker:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


@main.command()
@click.pass_obj
def mcp(config: RouterConfig) -> None:
    """Run the MCP server for Claude integration.

    This command starts the MCP server which exposes AgentRouter tools
    to Claude Code via the Model Context Protocol.

    \b
    Configure in .mcp.json:
        {
            "mcpServers": {
                "agentrouter": {
                    "command": "agentrouter",
                    "args": ["mcp"]
                }
            }
        }
    """
    from mcp_agentrouter.server import create_server

    create_server(config).run()


# Template for CLAUDE.md instructions
CLAUDE_MD_TEMPLATE = '''# AgentRouter

Route work to the right agent before starting it.

## Tools

```python
# Decide who should handle a task
classify_task(message="add unit tests for the parser")

# Implementation work: implement | test | refactor | review
delegate_to_codex(task="...", task_type="test")

# Research: research | compare | analyze | architecture
delegate_to_gemini(query="state management", task_type="compare", options=["redux", "zustand"])

# Classify and delegate in one step
auto_route(message="...")
```

## Workflow

1. `classify_task` for anything that is not obviously design or explanation
2. Delegate `codex` and `gemini` results; handle `internal` tasks yourself
3. Review delegated output before presenting it
'''


def _replace_agentrouter_section(content: str, new_section: str) -> str:
    """Replace existing AgentRouter section in CLAUDE.md content."""
    # Match from "# AgentRouter" to the next top-level heading or end of file
    pattern = r'# AgentRouter[^\n]*\n.*?(?=\n# [^#]|\Z)'
    if re.search(pattern, content, re.DOTALL):
        return re.sub(pattern, lambda _: new_section.strip(), content, count=1, flags=re.DOTALL)
    return content


@main.command()
@click.option(
    "--force", "-f",
    is_flag=True,
    help="Replace existing AgentRouter section in CLAUDE.md",
)
def init(force: bool) -> None:
    """Initialize AgentRouter in a project.

    Adds tool instructions to CLAUDE.md and registers the MCP server
    in .mcp.json.

    \b
    Example:
        cd /path/to/myproject
        agentrouter init
        agentrouter init --force    # Update existing AgentRouter section
    """
    import shutil

    cwd = Path.cwd()

    # 1. Create/update CLAUDE.md
    claude_md_path = cwd / "CLAUDE.md"

    if claude_md_path.exists():
        existing = claude_md_path.read_text()
        has_section = "# AgentRouter" in existing

        if has_section and force:
            updated = _replace_agentrouter_section(existing, CLAUDE_MD_TEMPLATE)
            claude_md_path.write_text(updated)
            click.echo("Replaced AgentRouter section in CLAUDE.md")
        elif has_section:
            click.echo("CLAUDE.md already has AgentRouter instructions (use --force to replace)")
        else:
            with open(claude_md_path, "a") as f:
                f.write("\n\n" + CLAUDE_MD_TEMPLATE)
            click.echo("Updated CLAUDE.md with AgentRouter instructions")
    else:
        claude_md_path.write_text(CLAUDE_MD_TEMPLATE)
        click.echo("Created CLAUDE.md with AgentRouter instructions")

    # 2. Create/update .mcp.json
    mcp_json_path = cwd / ".mcp.json"
    executable = shutil.which("agentrouter") or "agentrouter"

    server_config = {
        "command": executable,
        "args": ["mcp"],
    }

    if mcp_json_path.exists():
        try:
            mcp_config = json.loads(mcp_json_path.read_text())
        except json.JSONDecodeError:
            raise click.ClickException(".mcp.json is not valid JSON; fix or remove it and rerun init")
    else:
        mcp_config = {"mcpServers": {}}

    if "mcpServers" not in mcp_config:
        mcp_config["mcpServers"] = {}

    if "agentrouter" in mcp_config["mcpServers"]:
        click.echo(".mcp.json already has agentrouter config, skipping...")
    else:
        mcp_config["mcpServers"]["agentrouter"] = server_config
        mcp_json_path.write_text(json.dumps(mcp_config, indent=2) + "\n")
        click.echo("Updated .mcp.json with agentrouter MCP server")

    click.echo("\n✓ AgentRouter initialized")
    click.echo("\nNext steps:")
    click.echo("  1. Restart Claude Code to load MCP tools")
    click.echo("  2. Run 'agentrouter check' to verify the agent CLIs")


if __name__ == "__main__":
    main()

"""Coding agents that can load the better-icons MCP server.

Each agent keeps its MCP servers in a JSON file. Setup merges our entry
into ``mcpServers`` and leaves every other key alone.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import structlog

from better_icons import PACKAGE_NAME

logger = structlog.get_logger()


@dataclass
class AgentConfig:
    """Where one agent keeps its MCP configuration."""

    name: str
    display_name: str
    config_path: Path
    project_config_path: Path
    detected: bool


@dataclass
class InstallResult:
    """Outcome of configuring one agent."""

    agent: str
    success: bool
    path: Path
    error: Optional[str] = None


def _claude_code_config_path(home: Path) -> Path:
    """Native installs use ~/.claude.json, npm installs ~/.claude/settings.json."""
    native = home / ".claude.json"
    if native.exists():
        return native
    return home / ".claude" / "settings.json"


def get_agent_configs(home: Optional[Path] = None, cwd: Optional[Path] = None) -> list[AgentConfig]:
    """List supported agents with their config paths and detection status.

    Args:
        home: Home directory (defaults to the current user's)
        cwd: Project directory (defaults to the working directory)
    """
    home = home or Path.home()
    cwd = cwd or Path.cwd()

    return [
        AgentConfig(
            name="cursor",
            display_name="Cursor",
            config_path=home / ".cursor" / "mcp.json",
            project_config_path=cwd / ".cursor" / "mcp.json",
            detected=(home / ".cursor").exists(),
        ),
        AgentConfig(
            name="claude-code",
            display_name="Claude Code",
            config_path=_claude_code_config_path(home),
            project_config_path=cwd / ".mcp.json",
            detected=(home / ".claude.json").exists() or (home / ".claude").exists(),
        ),
        AgentConfig(
            name="opencode",
            display_name="OpenCode",
            config_path=home / ".config" / "opencode" / "opencode.json",
            project_config_path=cwd / "opencode.json",
            detected=(home / ".config" / "opencode").exists(),
        ),
        AgentConfig(
            name="windsurf",
            display_name="Windsurf",
            config_path=home / ".windsurf" / "mcp.json",
            project_config_path=cwd / ".windsurf" / "mcp.json",
            detected=(home / ".windsurf").exists(),
        ),
        AgentConfig(
            name="vscode",
            display_name="VS Code (Copilot)",
            config_path=home / ".vscode" / "mcp.json",
            project_config_path=cwd / ".vscode" / "mcp.json",
            detected=(home / ".vscode").exists(),
        ),
    ]


def get_mcp_server_config() -> dict:
    """The ``mcpServers`` entry that launches this server."""
    return {
        PACKAGE_NAME: {
            "command": PACKAGE_NAME,
            "args": ["serve"],
        },
    }


def shorten_path(path: Path, home: Optional[Path] = None, cwd: Optional[Path] = None) -> str:
    """Display a path relative to the project ("./...") or home ("~/...")."""
    home = home or Path.home()
    cwd = cwd or Path.cwd()
    if path.is_relative_to(cwd):
        return "./" + str(path.relative_to(cwd))
    if path.is_relative_to(home):
        return "~/" + str(path.relative_to(home))
    return str(path)


def read_json_file(path: Path) -> dict:
    """Read a JSON object, or an empty dict if missing or invalid."""
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text())
    except (json.JSONDecodeError, UnicodeDecodeError, IOError):
        return {}
    return data if isinstance(data, dict) else {}


def write_json_file(path: Path, data: dict) -> None:
    """Write JSON with a trailing newline, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n")


def install_agent(agent: AgentConfig, server_config: dict) -> InstallResult:
    """Merge the server entry into an agent's config file.

    Existing servers and unrelated keys are preserved. Errors are captured
    in the result rather than raised so one agent cannot block the others.
    """
    try:
        config = read_json_file(agent.config_path)
        servers = config.get("mcpServers")
        config["mcpServers"] = {**(servers if isinstance(servers, dict) else {}), **server_config}
        write_json_file(agent.config_path, config)
    except OSError as e:
        logger.warning("agent_install_failed", agent=agent.name, error=str(e))
        return InstallResult(agent=agent.display_name, success=False, path=agent.config_path, error=str(e))

    logger.info("agent_installed", agent=agent.name, path=str(agent.config_path))
    return InstallResult(agent=agent.display_name, success=True, path=agent.config_path)

"""Renderers turning infographic payloads into SVG markup.

Renderers are plain callables ``(payload, options) -> markup`` returning a
string or an awaitable. The pipeline awaits them concurrently, so renderers
backed by a subprocess run side by side.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping, Sequence
import contextlib
from importlib import resources
import inspect
import json
import logging
import os
from pathlib import Path
import shlex
import shutil
from typing import Any

from infosmith.core.exceptions import RendererExecutionError
from infosmith.core.substitution import Renderer


logger = logging.getLogger(__name__)

NODE_CLI_HINT_PATHS: tuple[Path, ...] = (Path("/usr/local/bin/node"), Path("/snap/bin/node"))
SSR_SCRIPT_NAME = "infographic-ssr.mjs"


def _resolve_cli(names: Sequence[str], hints: Sequence[Path]) -> str | None:
    """Return an executable path looked up on $PATH, then in ``hints``."""
    for name in names:
        resolved = shutil.which(name)
        if resolved:
            return resolved
    for candidate in hints:
        if candidate and candidate.exists():
            return str(candidate)
    return None


def ssr_script_path() -> Path:
    """Return the path of the bundled Node.js SSR script."""
    return Path(str(resources.files("infosmith.adapters") / "assets" / SSR_SCRIPT_NAME))


class CommandRenderer:
    """Render payloads by piping a JSON request through an external command.

    The command receives ``{"spec": payload, "options": {...}}`` on stdin and
    must print the rendered markup on stdout.
    """

    def __init__(
        self,
        command: Sequence[str] | str,
        *,
        timeout: float | None = None,
        cwd: Path | str | None = None,
        env: Mapping[str, str] | None = None,
        description: str | None = None,
    ) -> None:
        self.command = shlex.split(command) if isinstance(command, str) else list(command)
        if not self.command:
            raise ValueError("Renderer command must not be empty")
        self.timeout = timeout
        self.cwd = Path(cwd) if cwd is not None else None
        self.env = dict(env) if env is not None else None
        self.description = description or Path(self.command[0]).name

    def build_command(self) -> list[str]:
        return list(self.command)

    def build_request(self, payload: str, options: Mapping[str, Any]) -> bytes:
        return json.dumps({"spec": payload, "options": dict(options)}).encode("utf-8")

    async def __call__(self, payload: str, options: Mapping[str, Any]) -> str:
        command = self.build_command()
        env = {**os.environ, **self.env} if self.env is not None else None
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=self.cwd,
                env=env,
            )
        except OSError as exc:
            raise RendererExecutionError(
                f"Failed to execute {self.description}: {exc}"
            ) from exc

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(self.build_request(payload, options)),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as exc:
            with contextlib.suppress(ProcessLookupError):
                process.kill()
            await process.wait()
            raise RendererExecutionError(
                f"{self.description} timed out after {self.timeout}s"
            ) from exc

        output = stdout.decode("utf-8", errors="replace")
        errors = stderr.decode("utf-8", errors="replace").strip()
        if process.returncode != 0:
            message = f"{self.description} exited with status {process.returncode}"
            detail = errors or output.strip()
            if detail:
                message = f"{message}: {detail}"
            raise RendererExecutionError(message, returncode=process.returncode, stderr=errors)

        if not output.strip():
            raise RendererExecutionError(f"{self.description} produced no output")
        return output


class NodeSsrRenderer(CommandRenderer):
    """Render with ``@antv/infographic`` server-side rendering through Node.js.

    The package is resolved from ``cwd`` (the current directory by default),
    so it must be installed in the project's ``node_modules``.
    """

    def __init__(
        self,
        *,
        node: str | None = None,
        script: Path | str | None = None,
        timeout: float | None = None,
        cwd: Path | str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self.node = node
        self.script = Path(script) if script is not None else ssr_script_path()
        super().__init__(
            [node or "node", str(self.script)],
            timeout=timeout,
            cwd=cwd,
            env=env,
            description="infographic SSR renderer",
        )

    def build_command(self) -> list[str]:
        executable = self.node or _resolve_cli(["node", "nodejs"], NODE_CLI_HINT_PATHS)
        if executable is None:
            raise RendererExecutionError(
                "Node.js is required to render infographics; install it and "
                "run `npm install @antv/infographic` in the project directory."
            )
        return [executable, str(self.script)]


class CallableRenderer:
    """Adapt a plain function into a renderer.

    Synchronous functions run in a worker thread so they do not block the
    event loop while other blocks render.
    """

    def __init__(self, func: Callable[..., Any]) -> None:
        self.func = func

    async def __call__(self, payload: str, options: Mapping[str, Any]) -> str:
        if inspect.iscoroutinefunction(self.func):
            return await self.func(payload, options)
        result = await asyncio.to_thread(self.func, payload, options)
        if inspect.isawaitable(result):
            result = await result
        return result


def _is_async_callable(func: Any) -> bool:
    if inspect.iscoroutinefunction(func):
        return True
    return inspect.iscoroutinefunction(getattr(func, "__call__", None))


def resolve_renderer(
    renderer: Renderer | Sequence[str] | str | None = None,
    *,
    timeout: float | None = None,
) -> Renderer:
    """Return a renderer from a callable, a command line, or the default.

    Synchronous callables are wrapped in :class:`CallableRenderer` so they run
    in worker threads instead of blocking the event loop.
    """
    if renderer is None:
        return NodeSsrRenderer(timeout=timeout)
    if isinstance(renderer, (str, list, tuple)):
        return CommandRenderer(renderer, timeout=timeout)
    if isinstance(renderer, (CommandRenderer, CallableRenderer)) or _is_async_callable(renderer):
        return renderer
    if callable(renderer):
        return CallableRenderer(renderer)
    raise TypeError(f"Unsupported renderer: {renderer!r}")


__all__ = [
    "CallableRenderer",
    "CommandRenderer",
    "NodeSsrRenderer",
    "resolve_renderer",
    "ssr_script_path",
]

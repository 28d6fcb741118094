"""Rich console front end for chatllm.

Speaks the same command grammar as the platform adapters, so a line
like ``chat -m kimi hello`` behaves exactly as it would in a group chat.
Lines without the trigger word are sent as plain chat messages.
"""

from __future__ import annotations

import asyncio

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory
from prompt_toolkit.patch_stdout import patch_stdout
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.text import Text

from chatllm.adapters.base import BaseAdapter
from chatllm.config import ChatLLMConfig, get_chatllm_home
from chatllm.core.chat import ChatService
from chatllm.core.sessions import PlatformSession

console = Console()


HELP_TEXT = """
**Usage:** `{trigger} [options] <message>` or just type a message.

**Options:**
- `-r`, `--reset` - Clear the conversation
- `-p`, `--picture` - Render the reply as an image card
- `-c`, `--continue` - Continue the last chat of another model
- `-m <name>`, `--model <name>` - Select the model ({models})
- `-v`, `--version` - Show the selected model

**Console commands:**
- `/help` - Show this help message
- `/quit` or `/exit` - Exit
"""


class ConsoleAdapter(BaseAdapter):
    """Interactive console treated as a single-user chat platform."""

    name = "console"

    def __init__(self, service: ChatService, config: ChatLLMConfig) -> None:
        super().__init__(service, config)
        self.session = PlatformSession(platform="console", channel_id="local", user_id="local")
        self._running = False

        history_dir = get_chatllm_home() / "history"
        history_dir.mkdir(parents=True, exist_ok=True)
        self.prompt_session: PromptSession[str] = PromptSession(
            history=FileHistory(str(history_dir / "cli_input.txt")),
        )

    async def _read_line(self, prompt: str) -> str:
        return await asyncio.get_event_loop().run_in_executor(
            None,
            lambda: self.prompt_session.prompt(prompt),
        )

    async def prompt(self, session: PlatformSession, message: str) -> str | None:
        console.print(f"[yellow]{message}[/yellow]")
        try:
            return await self._read_line("? ")
        except (EOFError, KeyboardInterrupt):
            return None

    async def start(self) -> None:
        """Main console loop."""
        self._running = True
        self._print_banner()

        with patch_stdout():
            while self._running:
                try:
                    line = (await self._read_line("\n> ")).strip()
                except (EOFError, KeyboardInterrupt):
                    console.print("\n[dim]Goodbye![/dim]")
                    break

                if not line:
                    continue

                if line.startswith("/"):
                    if not self._handle_console_command(line):
                        break
                    continue

                trigger = self.config.trigger_word
                if line.split(None, 1)[0].lower() != trigger.lower():
                    line = f"{trigger} {line}"

                with console.status(self.service.text("loading")):
                    reply = await self.on_message(self.session, line)

                if reply is not None:
                    self._print_reply(reply)

        self._running = False

    async def stop(self) -> None:
        self._running = False

    def _handle_console_command(self, command: str) -> bool:
        """Handle a slash command. Returns False if should exit."""
        cmd = command.split(maxsplit=1)[0].lower()

        if cmd in ("/quit", "/exit", "/q"):
            console.print("[dim]Goodbye![/dim]")
            return False

        if cmd == "/help":
            console.print(Markdown(HELP_TEXT.format(
                trigger=self.config.trigger_word,
                models=", ".join(self.service.registry.names) or "none",
            )))
        else:
            console.print(f"[red]Unknown command: {cmd}[/red]")
            console.print("[dim]Type /help for available commands[/dim]")
        return True

    def _print_reply(self, reply: str) -> None:
        if reply.startswith("data:image/"):
            console.print(f"[dim](image reply, {len(reply)} bytes as data URI)[/dim]")
            return
        console.print(
            Panel(
                Markdown(reply),
                border_style="blue",
                padding=(1, 2),
            )
        )

    def _print_banner(self) -> None:
        """Print the startup banner."""
        default = self.service.registry.default or "-"
        console.print(
            Panel(
                Text.from_markup(
                    f"[bold cyan]chatllm[/bold cyan]\n"
                    f"  [dim]Default model:[/dim] [bold]{default}[/bold]\n"
                    f"  [dim]Models:[/dim] {', '.join(self.service.registry.names) or 'none'}\n"
                    f"  [dim]Type /help for commands, /quit to exit[/dim]"
                ),
                border_style="cyan",
            )
        )

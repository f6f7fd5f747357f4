import sys
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger
from rich.console import Console

from ideaflow.agents.guard import GuardConfig
from ideaflow.core.provider import build_conversation
from ideaflow.core.session import (
    CMD_EXIT,
    SessionController,
    TurnOutcome,
    build_session,
    normalize_command,
)
from ideaflow.utils.env_cfg import (
    load_backoff_env,
    load_blocked_terms_env,
    load_generation_env,
    load_idea_retry_env,
    load_provider_env,
    load_safety_env,
)
from ideaflow.utils.logging_cfg import setup_logging

STYLES: dict[str, str] = {
    "info": "cyan",
    "idea": "blue",
    "warning": "yellow",
    "error": "red",
    "hint": "grey50",
    "plain": "white",
    "prompt": "green",
}

GOODBYE = "\nThank you for using the Idea Generation Assistant. Goodbye!\n"


class RichConsole:
    """
    Terminal console rendering styled output with rich and reading lines with input().
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(soft_wrap=True, highlight=False)

    def show(self, message: str, style: str = "info") -> None:
        self.console.print(message, style=STYLES.get(style, style), markup=False)

    def ask(self, prompt: str) -> str:
        self.console.print(prompt, style=STYLES["prompt"], end="", markup=False)
        return input()


def display_welcome(console: RichConsole) -> None:
    """
    Print the welcome banner with usage instructions.

    Args:
        console (RichConsole): The terminal console.
    """
    rule = "================================================="
    console.show(f"\n{rule}", "info")
    console.show("Welcome to the Idea Generation Assistant!", "info")
    console.show(f"{rule}\n", "info")
    console.show("How to use this assistant:", "plain")
    console.show("1. Ask any question about what to build or create", "plain")
    console.show("2. Get 3 creative ideas as response", "plain")
    console.show("3. Select your favorite idea(s) by number", "plain")
    console.show("4. Receive detailed guidance for your selection\n", "plain")
    console.show("Special commands:", "plain")
    console.show('- Type "back" to go to previous question', "hint")
    console.show('- Type "retry" to generate new ideas for current question', "hint")
    console.show('- Type "exit" to quit the program\n', "hint")
    console.show("Example questions you can ask:", "plain")
    console.show("- What app should I build?", "hint")
    console.show("- What business can I start with $5000?", "hint")
    console.show("- What website should I create for my portfolio?\n", "hint")
    console.show("Note: Please keep questions appropriate and professional.\n", "warning")
    console.show(f"{rule}\n", "info")
    console.show("Please ask your question below:", "warning")


def display_next_steps(console: RichConsole) -> None:
    console.show("\nYou can:", "warning")
    console.show("   1. Ask another question", "warning")
    console.show('   2. Type "back" to go to previous question', "warning")
    console.show('   3. Type "exit" to quit\n', "warning")


def run(console: RichConsole, controller: SessionController) -> int:
    """
    Read questions until the user exits.

    Args:
        console (RichConsole): The terminal console.
        controller (SessionController): The session controller.

    Returns:
        int: Process exit status.
    """
    while True:
        try:
            user_input = console.ask("You: ")
        except (EOFError, KeyboardInterrupt):
            console.show(GOODBYE, "warning")
            return 0

        if normalize_command(user_input) == CMD_EXIT:
            console.show(GOODBYE, "warning")
            return 0

        try:
            outcome = controller.handle_question(user_input)
        except (EOFError, KeyboardInterrupt):
            console.show(GOODBYE, "warning")
            return 0

        if outcome is TurnOutcome.EXIT:
            console.show(GOODBYE, "warning")
            return 0
        if outcome is TurnOutcome.COMPLETED:
            display_next_steps(console)


def main() -> None:
    """
    Main entry point for the CLI. Connects to the provider and runs the chat loop.
    """
    load_dotenv()
    log_path = setup_logging()
    logger.info("Logging to {}", log_path)
    console = RichConsole()

    try:
        with console.console.status("Initializing your idea assistant..."):
            conversation = build_conversation(
                load_provider_env(), load_generation_env(), load_safety_env()
            )
            controller = build_session(
                conversation,
                console,
                backoff=load_backoff_env(),
                idea_retry=load_idea_retry_env(),
                guard_config=GuardConfig(extra_terms=load_blocked_terms_env()),
            )
    except Exception as e:
        logger.exception("Startup failed: {}", e)
        console.show(f"An error occurred: {e}", "error")
        sys.exit(1)

    display_welcome(console)
    sys.exit(run(console, controller))


if __name__ == "__main__":
    sys.path.append(str(Path(__file__).parents[2].resolve()))
    main()

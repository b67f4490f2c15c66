"""
CLI entrypoint that runs a coaching check-in against the JSON-file store.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add parent directory to path for imports when running directly
if __name__ == "__main__":
    repo_root = Path(__file__).resolve().parents[2]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))

try:
    from src.coaching_engine.config import EngineSettings
    from src.coaching_engine.conversation import CoachingConversation
    from src.coaching_engine.errors import CoachingEngineError
    from src.coaching_engine.llm_client import StreamingChatModel
    from src.coaching_engine.models import FLOWS
    from src.coaching_engine.store import JsonFileContextStore
except ImportError:
    # Fallback to relative imports when run as module
    from .config import EngineSettings
    from .conversation import CoachingConversation
    from .errors import CoachingEngineError
    from .llm_client import StreamingChatModel
    from .models import FLOWS
    from .store import JsonFileContextStore


logger = logging.getLogger(__name__)


def build_demo_conversation(user_id: str, user_name: str, flow: str) -> CoachingConversation:
    """
    Wire settings, store and model together into a started conversation.

    Inputs:
        user_id: Store key for the user's notes and parked items.
        user_name: Name used in the system prompt.
        flow: One of morning, evening, adhoc.

    Outputs:
        CoachingConversation already moved to in_progress.
    """
    settings = EngineSettings.from_env()
    store = JsonFileContextStore(settings.data_dir)
    model = StreamingChatModel(settings)
    if not model.available:
        print("[Coach] Warning: no model configured; replies will use static fallbacks.")
    conversation = CoachingConversation(
        store=store,
        model=model,
        user_id=user_id,
        user_name=user_name,
        flow=flow,
        settings=settings,
    )
    conversation.start()
    logger.info("Loaded %d carryover item(s) for %s", len(conversation.carryover), user_id)
    return conversation


async def interactive_loop(conversation: CoachingConversation) -> None:
    """
    Simple REPL loop. Ends on quit/exit, EOF, or once the plan is confirmed.
    """
    print(f"Coaching Check-in ({conversation.flow})\nType 'quit' to exit.\n")
    print(f"Coach: {conversation.initial_greeting()}\n")
    sys.stdout.flush()

    while conversation.session.state == "in_progress":
        try:
            user_text = (await asyncio.to_thread(input, "You: ")).strip()
        except (EOFError, KeyboardInterrupt):
            print("\nEnding check-in. Goodbye!")
            conversation.abandon()
            break

        if not user_text:
            continue
        if user_text.lower() in {"quit", "exit"}:
            print("Goodbye!")
            conversation.abandon()
            break

        try:
            response = await conversation.process_turn(user_text)
        except CoachingEngineError as exc:
            print(f"Cannot continue this session: {exc}")
            conversation.abandon()
            break
        print(f"Coach: {response}\n")
        sys.stdout.flush()

    if conversation.session.state == "plan_confirmed":
        conversation.complete()
        print("Plan saved. Have a great day!")
    await conversation.flush()


def main() -> None:
    """
    Parse CLI args and start the interactive check-in.
    """
    parser = argparse.ArgumentParser(description="Run a coaching check-in in the terminal.")
    parser.add_argument("--user-id", default="demo-user", help="Store key for this user.")
    parser.add_argument("--name", default="there", help="Name the coach uses for you.")
    parser.add_argument(
        "--flow",
        choices=[flow for flow in FLOWS if flow != "challenge_intro"],
        default="morning",
        help="Which check-in to run.",
    )
    parser.add_argument("--verbose", action="store_true", help="Show debug logging.")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    conversation = build_demo_conversation(args.user_id, args.name, args.flow)
    asyncio.run(interactive_loop(conversation))


if __name__ == "__main__":
    main()

"""
Console Test Harness for IntakeDialogueManager

Simple console loop to exercise process() without the Flask layer.
"""

import logging
import sys

from intake.config import EngineConfig
from intake.engine import build_dialogue_manager
from intake.core.indicator_detector import active_indicators
from intake.utils.helpers import generate_session_id

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

EXIT_COMMANDS = {"quit", "exit", "stop"}
RESET_COMMAND = "reset"


def print_separator(char="=", length=60):
    """Print a separator line"""
    print(char * length)


def print_debug_info(turn):
    """Print metadata for a ProcessedTurn (never field values)"""
    print("\n" + "-" * 60)
    print("DEBUG INFO:")
    print("-" * 60)
    print(f"Intent: {turn.intent} (confidence {turn.confidence:.2f})")
    print(f"Risk level: {turn.risk_level}")
    print(f"Sentiment: {turn.sentiment:+.2f}")
    print(f"Stage: {turn.stage}")
    print(f"Fields captured: {sorted(turn.extracted_fields)}")
    print(f"Indicators: {active_indicators(turn.indicators)}")
    done = [name for name, met in turn.progress.items() if met]
    print(f"Milestones met: {done}")
    print("-" * 60)


def main():
    """Run console harness"""
    print_separator()
    print("TRAUMA-SENSITIVE INTAKE - CONSOLE TEST")
    print_separator()

    try:
        dm = build_dialogue_manager(EngineConfig.from_env())
    except Exception as e:
        print(f"\nFailed to initialize: {e}")
        return 1

    session_id = generate_session_id(short=True)
    print(f"\nSession: {session_id}")
    print("Type 'reset' to start a new session, 'quit', 'exit', or 'stop' to end\n")
    opening = dm.selector.get_next_question(dm.store.get_or_create(session_id).snapshot())
    print(f"System: {opening.question}\n")

    while True:
        try:
            user_input = input("> ").strip()

            if not user_input:
                print("Please enter a response.\n")
                continue

            if user_input.lower() in EXIT_COMMANDS:
                break

            if user_input.lower() == RESET_COMMAND:
                dm.reset_session(session_id)
                session_id = generate_session_id(short=True)
                print(f"\nStarted new session: {session_id}\n")
                continue

            turn = dm.process(session_id, user_input)
            print(f"\nSystem: {turn.response}\n")
            print_debug_info(turn)

        except (KeyboardInterrupt, EOFError):
            print("\n\nSession interrupted by user")
            break

    print_separator()
    print("Console test complete")
    print_separator()
    return 0


if __name__ == '__main__':
    sys.exit(main())

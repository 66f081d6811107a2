"""intentnet - interactive object-action intention prediction.

Predicts which object a person wants to use and what they want to do
with it by asking as few yes/no questions as possible, and learns from
every confirmed answer.
"""

__version__ = "0.1.0"


def main() -> None:
    """Entry point for the intentnet command."""
    print(f"intentnet v{__version__}")
    print("Interactive Object-Action Intention Prediction")
    print()
    print("Available commands:")
    print("  python scripts/run_interactive_session.py  - Answer questions in the console")
    print("  python scripts/run_evaluation.py           - Evaluate with a simulated user")
    print("  python scripts/generate_scenes.py          - Write simulated scene lists")
    print()
    print("See DESIGN.md for more info.")

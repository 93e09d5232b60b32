"""Interactive yes/no confirmation."""


def confirm(question: str) -> bool:
    """Ask a yes/no question on the terminal.

    Anything but an explicit yes, including end of input, is a no.
    """
    try:
        answer = input(f"{question} (y/n) ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")
